"""Docs corpus loader responsible for reading Markdown sources from disk."""
from __future__ import annotations

import fnmatch
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from docs_corpus.model.corpus_model import LoadIssue
from docs_corpus.model.elements import ParseIssue
from docs_corpus.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_EXTENSIONS = (".md", ".mdx")
SKIPPED_DIRECTORIES = {"node_modules", "__pycache__"}


@dataclass(slots=True)
class DocsCorpus:
    """Raw sources of a docs root, keyed by POSIX path relative to the root."""

    root: Path
    sources: Dict[str, str] = field(default_factory=dict)
    load_issues: List[LoadIssue] = field(default_factory=list)

    @classmethod
    def load(
        cls,
        root: Path,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        exclude: Sequence[str] = (),
    ) -> "DocsCorpus":
        """Read every Markdown file under ``root`` as UTF-8 text."""
        root = Path(root)
        if not root.is_dir():
            raise FileNotFoundError(f"Docs root not found: {root}")

        corpus = cls(root=root)
        suffixes = {suffix.lower() for suffix in extensions}
        for path in sorted(cls._iter_files(root)):
            relative = path.relative_to(root).as_posix()
            if path.suffix.lower() not in suffixes:
                continue
            if any(fnmatch.fnmatch(relative, pattern) for pattern in exclude):
                LOGGER.debug("Excluded %s", relative)
                continue
            corpus._read(path, relative)

        LOGGER.debug("Loaded %d documents from %s", len(corpus.sources), root)
        return corpus

    def require_source(self, source_path: str) -> str:
        if source_path not in self.sources:
            raise KeyError(f"Document missing from corpus: {source_path}")
        return self.sources[source_path]

    def paths(self) -> List[str]:
        return sorted(self.sources)

    # ------------------------------------------------------------------
    # Internal helpers
    @staticmethod
    def _iter_files(root: Path) -> Iterable[Path]:
        for path in root.rglob("*"):
            parts = path.relative_to(root).parts
            if any(part.startswith(".") or part in SKIPPED_DIRECTORIES for part in parts):
                continue
            if path.is_file():
                yield path

    def _read(self, path: Path, relative: str) -> None:
        data = path.read_bytes()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            line = data[: exc.start].count(b"\n") + 1
            LOGGER.warning("%s is not valid UTF-8 (byte offset %d)", relative, exc.start)
            self.load_issues.append(
                LoadIssue(relative, ParseIssue("encoding", f"File is not valid UTF-8: {exc.reason}", line))
            )
            return
        # A UTF-8 byte order mark is tolerated but not part of the text.
        self.sources[relative] = text.removeprefix("\ufeff")
