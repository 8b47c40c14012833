"""Aggregate model of one parsed Markdown document."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from docs_corpus.model.elements import (
    BlockElement,
    CodeBlock,
    HeadingBlock,
    LinkReference,
    ParseIssue,
    TableBlock,
)


@dataclass(slots=True)
class Document:
    """A single Markdown file of the corpus."""

    doc_id: str
    source_path: str
    blocks: List[BlockElement] = field(default_factory=list)
    front_matter: Dict[str, object] = field(default_factory=dict)
    links: List[LinkReference] = field(default_factory=list)
    anchors: Set[str] = field(default_factory=set)
    issues: List[ParseIssue] = field(default_factory=list)

    @property
    def headings(self) -> List[HeadingBlock]:
        return [block for block in self.blocks if isinstance(block, HeadingBlock)]

    @property
    def code_blocks(self) -> List[CodeBlock]:
        return [block for block in self.blocks if isinstance(block, CodeBlock)]

    @property
    def tables(self) -> List[TableBlock]:
        return [block for block in self.blocks if isinstance(block, TableBlock)]

    @property
    def images(self) -> List[LinkReference]:
        return [link for link in self.links if link.is_image]

    @property
    def internal_links(self) -> List[LinkReference]:
        return [link for link in self.links if not link.external]

    @property
    def external_links(self) -> List[LinkReference]:
        return [link for link in self.links if link.external]

    @property
    def title(self) -> Optional[str]:
        """Front matter title, else the first level-1 heading."""
        title = self.front_matter.get("title")
        if title is not None and str(title).strip():
            return str(title).strip()
        for heading in self.headings:
            if heading.level == 1:
                return heading.text
        return None
