"""Report syntax problems recorded by the loader and the Markdown parser."""
from __future__ import annotations

from typing import Iterator

from docs_corpus.checks.base import Check, CheckContext, RuleInfo
from docs_corpus.model.finding_model import Finding, Severity
from docs_corpus.utils.logger import get_logger

LOGGER = get_logger(__name__)


class ParseIssueCheck(Check):
    """Every document parses as valid Markdown."""

    rules = (
        RuleInfo("parse/encoding", Severity.ERROR, "File is valid UTF-8"),
        RuleInfo("parse/front-matter", Severity.ERROR, "Front matter is a valid YAML mapping"),
        RuleInfo("parse/unclosed-fence", Severity.ERROR, "Every code fence is closed"),
        RuleInfo("parse/table-columns", Severity.WARNING, "Table rows match the header width"),
        RuleInfo("parse/undefined-reference", Severity.WARNING, "Reference link labels are defined"),
    )

    def run(self, context: CheckContext) -> Iterator[Finding]:
        for load_issue in context.model.load_issues:
            yield self._from_issue(load_issue.source_path, load_issue.issue)
        for document in context.model.documents:
            for issue in document.issues:
                yield self._from_issue(document.source_path, issue)

    def _from_issue(self, path, issue) -> Finding:
        rule_id = f"parse/{issue.code}"
        if rule_id not in self._rules:
            # Unknown parser codes still surface, as plain errors.
            LOGGER.debug("No rule declared for parse issue %s", issue.code)
            return Finding(rule_id=rule_id, severity=Severity.ERROR, path=path, message=issue.message, line=issue.line)
        return self.finding(rule_id, path, issue.message, issue.line)
