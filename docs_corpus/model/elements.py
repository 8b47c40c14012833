"""In-memory representation of parsed Markdown content."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from docs_corpus.utils.paths import is_external, split_fragment


@dataclass(slots=True)
class HeadingBlock:
    """ATX or setext heading with its resolved anchor."""

    level: int
    text: str
    line: int
    anchor: str = ""
    explicit_id: Optional[str] = None


@dataclass(slots=True)
class ParagraphBlock:
    """Run of prose lines; ``kind`` tells lists, quotes and raw HTML apart."""

    text: str
    line: int
    kind: str = "paragraph"


@dataclass(slots=True)
class CodeBlock:
    """Fenced or indented code block.

    ``language`` is the first word of the info string, or ``None`` when the
    fence carries no info string at all. Indented blocks have an empty
    ``fence``.
    """

    info: str
    content: str
    line: int
    end_line: int
    fence: str = "```"
    closed: bool = True

    @property
    def indented(self) -> bool:
        return not self.fence

    @property
    def language(self) -> Optional[str]:
        words = self.info.split()
        if not words:
            return None
        # Docusaurus style titles: ```jsx title="App.jsx"
        return words[0].split("{", 1)[0] or None


@dataclass(slots=True)
class TableBlock:
    """GFM pipe table."""

    header: List[str]
    rows: List[List[str]]
    line: int
    alignments: List[Optional[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.header)


@dataclass(slots=True)
class LinkReference:
    """A link or image found in the document text."""

    target: str
    text: str
    line: int
    is_image: bool = False
    origin: str = "inline"

    @property
    def external(self) -> bool:
        return is_external(self.target)

    @property
    def parts(self) -> Tuple[str, Optional[str]]:
        return split_fragment(self.target)

    @property
    def href(self) -> str:
        return self.parts[0]

    @property
    def fragment(self) -> Optional[str]:
        return self.parts[1]


@dataclass(slots=True)
class ParseIssue:
    """Syntax problem noticed while parsing; the parser never raises for these."""

    code: str
    message: str
    line: Optional[int] = None


BlockElement = HeadingBlock | ParagraphBlock | CodeBlock | TableBlock
