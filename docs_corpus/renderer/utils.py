"""Common helpers shared by renderer implementations."""
from __future__ import annotations

from typing import Dict

from docs_corpus.model.finding_model import Severity


def severity_to_css(severity: Severity) -> Dict[str, str]:
    """Convert a severity into CSS properties for a table row."""
    css: Dict[str, str] = {}
    if severity is Severity.ERROR:
        css["color"] = "#b00020"
        css["font-weight"] = "700"
    elif severity is Severity.WARNING:
        css["color"] = "#8a6d00"
    return css
