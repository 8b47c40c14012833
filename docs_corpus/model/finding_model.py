"""Findings produced by the checks and the report that groups them."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def parse(cls, value: str) -> "Severity":
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown severity: {value!r}") from None


@dataclass(slots=True, frozen=True)
class Finding:
    """One rule violation at a path and (optionally) a line."""

    rule_id: str
    severity: Severity
    path: str
    message: str
    line: Optional[int] = None

    def sort_key(self) -> tuple:
        return (self.path, self.line or 0, self.rule_id, self.message)


@dataclass(slots=True)
class LintReport:
    """Sorted findings for one run of the linter."""

    findings: List[Finding] = field(default_factory=list)
    documents_checked: int = 0

    def __post_init__(self) -> None:
        self.findings = sorted(self.findings, key=Finding.sort_key)

    @property
    def errors(self) -> List[Finding]:
        return [finding for finding in self.findings if finding.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Finding]:
        return [finding for finding in self.findings if finding.severity is Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def by_path(self) -> Dict[str, List[Finding]]:
        grouped: Dict[str, List[Finding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.path, []).append(finding)
        return grouped

    def failed(self, strict: bool = False) -> bool:
        """True when the run should exit non-zero."""
        return self.has_errors or (strict and bool(self.warnings))
