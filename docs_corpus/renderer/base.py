"""Shared plumbing for report renderers."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from docs_corpus.model.finding_model import LintReport


class ReportRenderer:
    """Formats a report; writes it to ``output_path`` when one is given."""

    def __init__(self, output_path: Optional[Path] = None) -> None:
        self._output_path = output_path

    def render(self, report: LintReport) -> str:
        text = self.format(report)
        if self._output_path is not None:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_text(text, encoding="utf-8")
        return text

    def format(self, report: LintReport) -> str:
        raise NotImplementedError


def summary_line(report: LintReport) -> str:
    """One-line human summary of a report."""
    return (
        f"{report.documents_checked} documents checked: "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )
