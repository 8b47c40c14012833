"""Run the checks over a corpus model and collect a report."""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Type

from docs_corpus.checks.base import Check, CheckContext, rule_table
from docs_corpus.checks.code_blocks import CodeLanguageCheck
from docs_corpus.checks.external_links import ExternalLinkCheck
from docs_corpus.checks.links import InternalLinkCheck
from docs_corpus.checks.parsing import ParseIssueCheck
from docs_corpus.checks.sidebar import SidebarCheck
from docs_corpus.checks.structure import StructureCheck
from docs_corpus.config import ConfigError, LintConfig
from docs_corpus.model.corpus_model import CorpusModel
from docs_corpus.model.finding_model import Finding, LintReport, Severity
from docs_corpus.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_CHECKS: List[Type[Check]] = [
    ParseIssueCheck,
    CodeLanguageCheck,
    InternalLinkCheck,
    StructureCheck,
    SidebarCheck,
    ExternalLinkCheck,
]


class CorpusLinter:
    """Evaluates checks and applies the configured rule levels."""

    def __init__(self, config: LintConfig, checks: Optional[List[Type[Check]]] = None) -> None:
        self._config = config
        self._check_classes = checks if checks is not None else list(DEFAULT_CHECKS)
        self._rules = rule_table(self._check_classes)
        unknown = sorted(set(config.rules) - set(self._rules))
        if unknown:
            raise ConfigError(f"Unknown rule ids in configuration: {', '.join(unknown)}")

    def lint(self, model: CorpusModel) -> LintReport:
        context = CheckContext(model=model, config=self._config)
        findings: List[Finding] = []
        for check_cls in self._check_classes:
            check = check_cls()
            if not check.enabled(self._config):
                LOGGER.debug("Skipping disabled check %s", check_cls.__name__)
                continue
            for finding in check.run(context):
                adjusted = self._apply_level(finding)
                if adjusted is not None:
                    findings.append(adjusted)

        report = LintReport(findings=findings, documents_checked=len(model.documents))
        LOGGER.info(
            "Checked %d documents: %d errors, %d warnings",
            report.documents_checked,
            len(report.errors),
            len(report.warnings),
        )
        return report

    def _apply_level(self, finding: Finding) -> Optional[Finding]:
        level = self._config.rule_level(finding.rule_id)
        if level is None:
            return finding
        if level == "off":
            return None
        return replace(finding, severity=Severity.parse(level))
