"""Render a report as compiler-style text lines."""
from __future__ import annotations

from docs_corpus.model.finding_model import Finding, LintReport
from docs_corpus.renderer.base import ReportRenderer, summary_line


class TextRenderer(ReportRenderer):
    """``path:line: severity [rule] message`` per finding, then a summary."""

    def format(self, report: LintReport) -> str:
        lines = [self._format_finding(finding) for finding in report.findings]
        lines.append(summary_line(report))
        return "\n".join(lines) + "\n"

    @staticmethod
    def _format_finding(finding: Finding) -> str:
        location = finding.path if finding.line is None else f"{finding.path}:{finding.line}"
        return f"{location}: {finding.severity.value} [{finding.rule_id}] {finding.message}"
