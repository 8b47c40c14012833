"""Render a report into a standalone HTML page."""
from __future__ import annotations

from html import escape
from typing import Iterable

from docs_corpus.model.finding_model import Finding, LintReport
from docs_corpus.renderer.base import ReportRenderer, summary_line
from docs_corpus.renderer.utils import severity_to_css


class HtmlRenderer(ReportRenderer):
    """Produce a single-page table of findings grouped by document."""

    def format(self, report: LintReport) -> str:
        body = self._build_rows(report.findings) if report.findings else "<p>No findings.</p>"
        return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>Docs lint report</title>
  <style>
    body {{ font-family: system-ui, sans-serif; margin: 2rem; }}
    table {{ border-collapse: collapse; width: 100%; }}
    th, td {{ border-bottom: 1px solid #ddd; padding: 4px 8px; text-align: left; }}
  </style>
</head>
<body>
<h1>Docs lint report</h1>
<p>{escape(summary_line(report))}</p>
{body}
</body>
</html>
"""

    def _build_rows(self, findings: Iterable[Finding]) -> str:
        rows = "\n".join(self._finding_to_row(finding) for finding in findings)
        return (
            "<table>\n  <tr><th>Document</th><th>Line</th><th>Severity</th><th>Rule</th><th>Message</th></tr>\n"
            f"{rows}\n</table>"
        )

    def _finding_to_row(self, finding: Finding) -> str:
        style = "; ".join(f"{k}: {v}" for k, v in severity_to_css(finding.severity).items())
        line = "" if finding.line is None else str(finding.line)
        return (
            f"  <tr style=\"{style}\"><td>{escape(finding.path)}</td><td>{line}</td>"
            f"<td>{finding.severity.value}</td><td>{escape(finding.rule_id)}</td>"
            f"<td>{escape(finding.message)}</td></tr>"
        )
