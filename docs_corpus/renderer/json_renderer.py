"""Render a report as JSON for tooling."""
from __future__ import annotations

import json

from docs_corpus.model.finding_model import LintReport
from docs_corpus.renderer.base import ReportRenderer


class JsonRenderer(ReportRenderer):
    def format(self, report: LintReport) -> str:
        payload = {
            "documents_checked": report.documents_checked,
            "summary": {
                "errors": len(report.errors),
                "warnings": len(report.warnings),
                "total": len(report.findings),
            },
            "findings": [
                {
                    "rule": finding.rule_id,
                    "severity": finding.severity.value,
                    "path": finding.path,
                    "line": finding.line,
                    "message": finding.message,
                }
                for finding in report.findings
            ],
        }
        return json.dumps(payload, indent=2) + "\n"
