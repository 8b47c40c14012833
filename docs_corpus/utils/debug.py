"""Helpers to persist the parsed corpus for debugging."""
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from docs_corpus.model.corpus_model import CorpusModel


class DebugDumper:
    """Writes intermediate artifacts onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, model: CorpusModel) -> Path:
        """Persist the parsed documents and sidebars as JSON for offline analysis."""
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = {
            "root": str(model.root),
            "documents": [self._serialize(document) for document in model.documents],
            "sidebars": {
                name: self._serialize(sidebar) for name, sidebar in (model.sidebars.all() if model.sidebars else {}).items()
            },
            "load_issues": [self._serialize(issue) for issue in model.load_issues],
        }
        target = self.directory / "corpus_model.json"
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return target

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value):
            # Slotted dataclasses: walk the fields and tag the block type.
            data = {f.name: self._serialize(getattr(value, f.name)) for f in fields(value)}
            data["type"] = type(value).__name__
            return data
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return {str(k): self._serialize(v) for k, v in value.items()}
        if isinstance(value, (set, frozenset)):
            return sorted(self._serialize(v) for v in value)
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        if isinstance(value, Path):
            return str(value)
        if isinstance(value, (str, int, float, bool)) or value is None:
            return value
        return repr(value)
