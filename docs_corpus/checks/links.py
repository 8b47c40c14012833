"""Resolve internal links and images against the corpus and the file system."""
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Optional, Sequence

from docs_corpus.checks.base import Check, CheckContext, RuleInfo
from docs_corpus.model.corpus_model import CorpusModel, DocumentCatalog
from docs_corpus.model.document_model import Document
from docs_corpus.model.elements import LinkReference
from docs_corpus.model.finding_model import Finding, Severity
from docs_corpus.utils.logger import get_logger
from docs_corpus.utils.paths import has_markdown_suffix, resolve_relative

LOGGER = get_logger(__name__)

INDEX_NAMES = ("index", "README")


@dataclass(slots=True)
class Resolution:
    """Outcome of resolving one link.

    ``kind`` is ``document`` (``document`` is set), ``asset`` (a file on disk),
    ``missing-document`` or ``missing-asset``.
    """

    kind: str
    document: Optional[Document] = None
    detail: str = ""

    @property
    def missing(self) -> bool:
        return self.kind.startswith("missing")


class LinkResolver:
    """Maps link targets onto documents of the catalog or files on disk."""

    def __init__(
        self,
        root: Path,
        documents: DocumentCatalog,
        route_base_path: str = "docs",
        static_dirs: Sequence[Path] = (),
        extensions: Sequence[str] = (".md", ".mdx"),
    ) -> None:
        self._root = Path(root)
        self._documents = documents
        self._route_base_path = route_base_path.strip("/")
        self._static_dirs = [Path(directory) for directory in static_dirs]
        self._extensions = list(extensions)

    @classmethod
    def for_model(cls, model: CorpusModel, route_base_path: str, extensions: Sequence[str]) -> "LinkResolver":
        return cls(model.root, model.documents, route_base_path, model.static_dirs, extensions)

    def resolve(self, source: Document, link: LinkReference) -> Resolution:
        href = link.href
        if not href:
            return Resolution("document", document=source)
        if href.startswith("/"):
            return self._resolve_absolute(href, link.is_image)
        return self._resolve_relative(source, href, link.is_image)

    # ------------------------------------------------------------------
    # Site-absolute targets
    def _resolve_absolute(self, href: str, is_image: bool) -> Resolution:
        route = href.strip("/")
        if not is_image:
            doc_route = self._strip_route_base(route)
            if doc_route is not None:
                document = self._find_by_route(doc_route)
                if document is not None:
                    return Resolution("document", document=document)
                if self._route_base_path:
                    return Resolution("missing-document", detail=f"no document with id {doc_route or '(root)'!r}")

        for static_dir in self._static_dirs:
            if (static_dir / route).exists():
                return Resolution("asset")
        if not is_image and (not PurePosixPath(route).suffix or has_markdown_suffix(route)):
            return Resolution("missing-document", detail="no document or static file at this path")
        return Resolution("missing-asset", detail="file not found in static directories")

    def _strip_route_base(self, route: str) -> Optional[str]:
        if not self._route_base_path:
            return route
        if route == self._route_base_path:
            return ""
        prefix = self._route_base_path + "/"
        if route.startswith(prefix):
            return route[len(prefix) :]
        return None

    def _find_by_route(self, route: str) -> Optional[Document]:
        route = route.strip("/")
        for suffix in self._extensions:
            if route.lower().endswith(suffix):
                route = route[: -len(suffix)]
                break
        candidates = [route] + [posixpath.join(route, name) if route else name for name in INDEX_NAMES]
        if route:
            candidates.append(posixpath.join(route, posixpath.basename(route)))
        for candidate in candidates:
            document = self._documents.get(candidate)
            if document is not None:
                return document
        return None

    # ------------------------------------------------------------------
    # Relative targets
    def _resolve_relative(self, source: Document, href: str, is_image: bool) -> Resolution:
        resolved = resolve_relative(source.source_path, href.rstrip("/") or ".")

        if not is_image and has_markdown_suffix(resolved):
            document = self._documents.by_path(resolved)
            if document is not None:
                return Resolution("document", document=document)
            if resolved.startswith("..") and (self._root / resolved).is_file():
                return Resolution("asset")
            return Resolution("missing-document", detail="file is not part of the docs corpus")

        if not is_image and not PurePosixPath(resolved).suffix:
            document = self._find_by_path_stem(resolved)
            if document is None:
                document = self._find_by_route(resolve_relative(source.doc_id, href.rstrip("/") or "."))
            if document is not None:
                return Resolution("document", document=document)

        if (self._root / resolved).exists():
            return Resolution("asset")
        if not is_image and not PurePosixPath(resolved).suffix:
            return Resolution("missing-document", detail="no document or file at this path")
        return Resolution("missing-asset", detail="file not found")

    def _find_by_path_stem(self, resolved: str) -> Optional[Document]:
        candidates: List[str] = [resolved + suffix for suffix in self._extensions]
        for name in INDEX_NAMES:
            candidates.extend(posixpath.join(resolved, name) + suffix for suffix in self._extensions)
        for candidate in candidates:
            document = self._documents.by_path(posixpath.normpath(candidate))
            if document is not None:
                return document
        return None


class InternalLinkCheck(Check):
    """Every internal link resolves to an existing document, anchor or file."""

    rules = (
        RuleInfo("links/broken-document", Severity.ERROR, "Links to documents resolve"),
        RuleInfo("links/broken-anchor", Severity.ERROR, "Link fragments exist in the target document"),
        RuleInfo("links/missing-asset", Severity.ERROR, "Images and file links exist on disk"),
    )

    def run(self, context: CheckContext) -> Iterator[Finding]:
        resolver = LinkResolver.for_model(
            context.model, context.config.route_base_path, context.config.extensions
        )
        for document in context.model.documents:
            for link in document.internal_links:
                yield from self._check_link(resolver, document, link)

    def _check_link(self, resolver: LinkResolver, document: Document, link: LinkReference) -> Iterator[Finding]:
        if not link.target.strip():
            yield self.finding("links/broken-document", document.source_path, "Link has an empty target", link.line)
            return

        resolution = resolver.resolve(document, link)
        if resolution.kind == "missing-document":
            yield self.finding(
                "links/broken-document",
                document.source_path,
                f"Broken link to {link.target!r}: {resolution.detail}",
                link.line,
            )
            return
        if resolution.kind == "missing-asset":
            noun = "Image" if link.is_image else "Linked file"
            yield self.finding(
                "links/missing-asset",
                document.source_path,
                f"{noun} {link.target!r} not found: {resolution.detail}",
                link.line,
            )
            return

        fragment = link.fragment
        target = resolution.document
        if fragment and target is not None and fragment not in target.anchors:
            where = "this document" if target is document else target.source_path
            yield self.finding(
                "links/broken-anchor",
                document.source_path,
                f"Anchor #{fragment} does not exist in {where}",
                link.line,
            )
        elif fragment and target is None:
            LOGGER.debug("Not checking fragment #%s on non-document target %s", fragment, link.target)
