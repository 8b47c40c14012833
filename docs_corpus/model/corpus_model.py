"""Catalog of parsed documents and the corpus-wide model the checks consume."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional

from docs_corpus.model.document_model import Document
from docs_corpus.model.elements import ParseIssue
from docs_corpus.model.sidebar_model import SidebarCatalog


class DocumentCatalog:
    """Documents keyed by doc id and by source path.

    Doc ids are not guaranteed unique; the first document in source path
    order wins the lookup and the rest stay reachable through ``duplicates``.
    """

    def __init__(self, documents: List[Document]) -> None:
        self._documents = sorted(documents, key=lambda doc: doc.source_path)
        self._by_id: Dict[str, Document] = {}
        self._by_path: Dict[str, Document] = {}
        self._duplicates: Dict[str, List[Document]] = {}
        for document in self._documents:
            self._by_path[document.source_path] = document
            if document.doc_id in self._by_id:
                self._duplicates.setdefault(document.doc_id, [self._by_id[document.doc_id]]).append(document)
                continue
            self._by_id[document.doc_id] = document

    def get(self, doc_id: Optional[str]) -> Optional[Document]:
        """Return the document registered for ``doc_id``."""
        if doc_id is None:
            return None
        return self._by_id.get(doc_id)

    def by_path(self, source_path: str) -> Optional[Document]:
        return self._by_path.get(source_path)

    def ids(self) -> List[str]:
        return list(self._by_id)

    def duplicates(self) -> Mapping[str, List[Document]]:
        return dict(self._duplicates)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)


@dataclass(slots=True)
class LoadIssue:
    """A file that could not be turned into a document."""

    source_path: str
    issue: ParseIssue


@dataclass(slots=True)
class CorpusModel:
    """Everything the checks need to know about one docs root."""

    root: Path
    documents: DocumentCatalog
    sidebars: Optional[SidebarCatalog] = None
    load_issues: List[LoadIssue] = field(default_factory=list)
    static_dirs: List[Path] = field(default_factory=list)
