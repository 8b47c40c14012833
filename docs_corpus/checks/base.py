"""Rule metadata and the check base class."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple, Type

from docs_corpus.config import LintConfig
from docs_corpus.model.corpus_model import CorpusModel
from docs_corpus.model.finding_model import Finding, Severity


@dataclass(frozen=True)
class RuleInfo:
    """Identifier, default severity and one-line description of a rule."""

    rule_id: str
    severity: Severity
    description: str


@dataclass(slots=True)
class CheckContext:
    model: CorpusModel
    config: LintConfig


class Check:
    """A group of related rules evaluated together over the corpus."""

    rules: Tuple[RuleInfo, ...] = ()

    def __init__(self) -> None:
        self._rules = {rule.rule_id: rule for rule in self.rules}

    def enabled(self, config: LintConfig) -> bool:
        return True

    def run(self, context: CheckContext) -> Iterator[Finding]:
        raise NotImplementedError

    def finding(self, rule_id: str, path: str, message: str, line: Optional[int] = None) -> Finding:
        """Build a finding carrying the rule's default severity."""
        rule = self._rules[rule_id]
        return Finding(rule_id=rule_id, severity=rule.severity, path=path, message=message, line=line)


def rule_table(checks: Iterable[Type[Check]]) -> Dict[str, RuleInfo]:
    """All rules declared by ``checks``, keyed by id."""
    table: Dict[str, RuleInfo] = {}
    for check_cls in checks:
        for rule in check_cls.rules:
            table[rule.rule_id] = rule
    return table
