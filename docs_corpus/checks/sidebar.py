"""Cross-check the sidebars against the documents of the corpus."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, Set

from docs_corpus.checks.base import Check, CheckContext, RuleInfo
from docs_corpus.model.document_model import Document
from docs_corpus.model.finding_model import Finding, Severity
from docs_corpus.model.sidebar_model import SidebarCatalog

HIDDEN_FRONT_MATTER_KEYS = ("unlisted", "draft")


class SidebarCheck(Check):
    rules = (
        RuleInfo("sidebar/unknown-document", Severity.ERROR, "Sidebar entries point at existing documents"),
        RuleInfo("sidebar/duplicate-entry", Severity.WARNING, "A document appears once per sidebar"),
        RuleInfo("sidebar/orphan-document", Severity.WARNING, "Every document is reachable from a sidebar"),
    )

    def run(self, context: CheckContext) -> Iterator[Finding]:
        sidebars = context.model.sidebars
        if sidebars is None:
            return
        path = self._display_path(sidebars, context.config.base_dir)
        documents = context.model.documents

        seen: Dict[str, Set[str]] = {}
        for sidebar, item in sidebars.doc_refs():
            if documents.get(item.doc_id) is None:
                yield self.finding(
                    "sidebar/unknown-document",
                    path,
                    f"Sidebar {sidebar.name!r} references unknown doc id {item.doc_id!r}",
                )
                continue
            ids = seen.setdefault(sidebar.name, set())
            if item.doc_id in ids:
                yield self.finding(
                    "sidebar/duplicate-entry",
                    path,
                    f"Doc id {item.doc_id!r} is listed more than once in sidebar {sidebar.name!r}",
                )
            ids.add(item.doc_id)

        referenced = sidebars.referenced_ids()
        generated = sidebars.autogenerated_dirs()
        for document in documents:
            if document.doc_id in referenced or self._hidden(document):
                continue
            if any(self._covered(document, directory) for directory in generated):
                continue
            yield self.finding(
                "sidebar/orphan-document",
                document.source_path,
                f"Doc id {document.doc_id!r} is not listed in any sidebar",
            )

    @staticmethod
    def _hidden(document: Document) -> bool:
        return any(document.front_matter.get(key) is True for key in HIDDEN_FRONT_MATTER_KEYS)

    @staticmethod
    def _covered(document: Document, directory: str) -> bool:
        directory = directory.strip("/")
        if directory in ("", "."):
            return True
        return document.source_path.startswith(directory + "/")

    @staticmethod
    def _display_path(sidebars: SidebarCatalog, base_dir: Path) -> str:
        if sidebars.source_path is None:
            return "sidebars"
        source = Path(sidebars.source_path)
        try:
            return source.resolve().relative_to(Path(base_dir).resolve()).as_posix()
        except ValueError:
            return source.as_posix()
