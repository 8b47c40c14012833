"""Document-level structure: titles, heading levels and unique doc ids."""
from __future__ import annotations

from typing import Iterator, Optional

from docs_corpus.checks.base import Check, CheckContext, RuleInfo
from docs_corpus.model.document_model import Document
from docs_corpus.model.finding_model import Finding, Severity


class StructureCheck(Check):
    rules = (
        RuleInfo("structure/missing-title", Severity.WARNING, "Documents have a title"),
        RuleInfo("structure/multiple-h1", Severity.WARNING, "Documents have at most one level-1 heading"),
        RuleInfo("structure/heading-increment", Severity.WARNING, "Heading levels increase by one at a time"),
        RuleInfo("structure/duplicate-id", Severity.ERROR, "Doc ids are unique across the corpus"),
    )

    def run(self, context: CheckContext) -> Iterator[Finding]:
        for document in context.model.documents:
            yield from self._check_document(document)

        for doc_id, documents in context.model.documents.duplicates().items():
            first, *others = documents
            for other in others:
                yield self.finding(
                    "structure/duplicate-id",
                    other.source_path,
                    f"Doc id {doc_id!r} is already used by {first.source_path}",
                )

    def _check_document(self, document: Document) -> Iterator[Finding]:
        if document.title is None:
            yield self.finding(
                "structure/missing-title",
                document.source_path,
                "Document has neither a front matter title nor a level-1 heading",
            )

        seen_h1 = False
        previous: Optional[int] = None
        for heading in document.headings:
            if heading.level == 1:
                if seen_h1:
                    yield self.finding(
                        "structure/multiple-h1",
                        document.source_path,
                        f"Additional level-1 heading {heading.text!r}",
                        heading.line,
                    )
                seen_h1 = True
            if previous is not None and heading.level > previous + 1:
                yield self.finding(
                    "structure/heading-increment",
                    document.source_path,
                    f"Heading level jumps from h{previous} to h{heading.level}",
                    heading.line,
                )
            previous = heading.level
