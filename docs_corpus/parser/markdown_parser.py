"""Parse Markdown source into structured document blocks."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from docs_corpus.model.document_model import Document
from docs_corpus.model.elements import (
    BlockElement,
    CodeBlock,
    HeadingBlock,
    ParagraphBlock,
    ParseIssue,
    TableBlock,
)
from docs_corpus.parser.front_matter import split_front_matter
from docs_corpus.parser.inline_parser import InlineScanner, mask_html_comments, parse_definition
from docs_corpus.utils.logger import get_logger
from docs_corpus.utils.paths import doc_id_for
from docs_corpus.utils.slugger import Slugger
from docs_corpus.utils.text_normalizer import normalize_markdown_text

LOGGER = get_logger(__name__)

FENCE_OPEN = re.compile(r"^(?P<indent>\s*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
ATX_HEADING = re.compile(r"^ {0,3}(?P<marks>#{1,6})(?:[ \t]+(?P<text>.*?))?[ \t]*$")
ATX_CLOSING = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
EXPLICIT_ID = re.compile(r"\s*\{#(?P<id>[^}\s]+)\}\s*$")
SETEXT_UNDERLINE = re.compile(r"^ {0,3}(?P<char>=+|-+)[ \t]*$")
THEMATIC_BREAK = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
TABLE_DELIMITER = re.compile(r"^\s*\|?\s*:?-+:?\s*(?:\|\s*:?-+:?\s*)*\|?\s*$")
INDENTED_CODE_WIDTH = 4
LIST_ITEM = re.compile(r"^\s*(?:[-*+]|\d{1,9}[.)])(?:\s+|$)")
BLOCK_QUOTE = re.compile(r"^\s*>")
QUOTE_PREFIX = re.compile(r"^ {0,3}(?:> ?)+")
HTML_LINE = re.compile(r"^\s*</?[A-Za-z!]")
MDX_STATEMENT = re.compile(
    r"^(?:import\s+(?:.+\s+from\s+)?['\"][^'\"]+['\"];?|export\s+(?:const|default|function|let)\b.*)\s*$"
)

Lines = List[Tuple[int, str]]


class MarkdownParser:
    """Transforms Markdown source into a :class:`Document`.

    Parsing never raises for malformed content: problems are attached to the
    document as :class:`ParseIssue` entries.
    """

    def __init__(self, text: str, source_path: str) -> None:
        self._text = text
        self._source_path = source_path

    def parse(self) -> Document:
        """Parse the front matter and the block structure of the document."""
        front_matter = split_front_matter(self._text)
        issues: List[ParseIssue] = []
        if front_matter.issue is not None:
            issues.append(front_matter.issue)

        scanner = _BlockScanner(front_matter.body, front_matter.line_offset)
        blocks = scanner.scan()
        issues.extend(scanner.issues)

        inline = InlineScanner(scanner.definitions).scan(scanner.inline_lines)
        issues.extend(inline.issues)

        document = Document(
            doc_id=doc_id_for(self._source_path, front_matter.data),
            source_path=self._source_path,
            blocks=blocks,
            front_matter=front_matter.data,
            links=inline.links,
            issues=issues,
        )
        document.anchors = self._collect_anchors(document.headings) | inline.anchors
        LOGGER.debug(
            "Parsed %s: %d blocks, %d links, %d issues",
            self._source_path,
            len(blocks),
            len(document.links),
            len(issues),
        )
        return document

    def _collect_anchors(self, headings: List[HeadingBlock]) -> set:
        slugger = Slugger()
        for heading in headings:
            if heading.explicit_id:
                slugger.reserve(heading.explicit_id)
        for heading in headings:
            heading.anchor = heading.explicit_id or slugger.slug(heading.text)
        return {heading.anchor for heading in headings if heading.anchor}


class _BlockScanner:
    """Line-oriented block scanner; keeps inline text aside for the second pass."""

    def __init__(self, body: str, line_offset: int) -> None:
        self._lines = [line.rstrip("\r") for line in body.split("\n")]
        self._offset = line_offset
        self.blocks: List[BlockElement] = []
        self.issues: List[ParseIssue] = []
        self.inline_lines: Lines = []
        self.definitions: Dict[str, str] = {}
        self._paragraph: Lines = []
        self._in_list = False

    def scan(self) -> List[BlockElement]:
        index = 0
        while index < len(self._lines):
            index = self._scan_line(index)
        self._flush_paragraph()
        return self.blocks

    def _line_no(self, index: int) -> int:
        return index + 1 + self._offset

    def _scan_line(self, index: int) -> int:
        line = self._lines[index]

        if not line.strip():
            self._flush_paragraph()
            return index + 1

        indent = _indent_width(line)
        if indent >= INDENTED_CODE_WIDTH and not self._paragraph and not self._in_list:
            return self._scan_indented_code(index)
        if LIST_ITEM.match(line):
            self._in_list = True
        elif indent == 0 and not self._paragraph:
            self._in_list = False

        quote = QUOTE_PREFIX.match(line)
        fence = FENCE_OPEN.match(line[quote.end() :] if quote else line)
        if fence and not (fence.group("fence")[0] == "`" and "`" in fence.group("info")):
            self._flush_paragraph()
            return self._scan_fence(index, fence, quoted=quote is not None)

        if line.lstrip().startswith("<!--"):
            self._flush_paragraph()
            return self._skip_comment(index)

        if not self._paragraph and MDX_STATEMENT.match(line):
            LOGGER.debug("Skipping MDX statement on line %d", self._line_no(index))
            return index + 1

        heading = ATX_HEADING.match(line)
        if heading:
            self._flush_paragraph()
            self._add_heading(len(heading.group("marks")), heading.group("text") or "", index)
            return index + 1

        underline = SETEXT_UNDERLINE.match(line)
        if underline and self._paragraph and self._paragraph_kind() == "paragraph":
            level = 1 if underline.group("char").startswith("=") else 2
            start_line, _ = self._paragraph[0]
            text = " ".join(part.strip() for _, part in self._paragraph)
            self._paragraph = []
            self._add_heading(level, text, start_line - 1 - self._offset)
            return index + 1

        if THEMATIC_BREAK.match(line):
            self._flush_paragraph()
            return index + 1

        if "|" in line and index + 1 < len(self._lines) and TABLE_DELIMITER.match(self._lines[index + 1]):
            if "|" in self._lines[index + 1] or line.strip().startswith("|"):
                self._flush_paragraph()
                return self._scan_table(index)

        definition = parse_definition(line)
        if definition is not None and not self._paragraph:
            label, target = definition
            self.definitions.setdefault(label, target)
            return index + 1

        self._paragraph.append((self._line_no(index), line))
        return index + 1

    def _paragraph_kind(self) -> Optional[str]:
        if not self._paragraph:
            return None
        first = self._paragraph[0][1]
        if LIST_ITEM.match(first):
            return "list"
        if BLOCK_QUOTE.match(first):
            return "quote"
        if HTML_LINE.match(first):
            return "html"
        return "paragraph"

    def _flush_paragraph(self) -> None:
        if not self._paragraph:
            return
        kind = self._paragraph_kind() or "paragraph"
        text = "\n".join(part for _, part in self._paragraph)
        self.blocks.append(ParagraphBlock(text=text, line=self._paragraph[0][0], kind=kind))
        # Comments may span several lines of one paragraph.
        masked = mask_html_comments(text).split("\n")
        self.inline_lines.extend((line_no, part) for (line_no, _), part in zip(self._paragraph, masked))
        self._paragraph = []

    def _add_heading(self, level: int, raw: str, index: int) -> None:
        raw = ATX_CLOSING.sub("", raw) if raw.strip("# \t") else ""
        explicit_id = None
        explicit = EXPLICIT_ID.search(raw)
        if explicit:
            explicit_id = explicit.group("id")
            raw = raw[: explicit.start()]
        line_no = self._line_no(index)
        self.blocks.append(
            HeadingBlock(level=level, text=normalize_markdown_text(raw), line=line_no, explicit_id=explicit_id)
        )
        self.inline_lines.append((line_no, raw))

    def _scan_fence(self, index: int, opening: re.Match, quoted: bool = False) -> int:
        fence = opening.group("fence")
        info = opening.group("info").strip()
        closing = re.compile(r"^\s*" + re.escape(fence[0]) + "{" + str(len(fence)) + r",}\s*$")
        content: List[str] = []
        cursor = index + 1
        while cursor < len(self._lines):
            line = self._lines[cursor]
            if quoted:
                # A fence inside a block quote ends with the quote.
                prefix = QUOTE_PREFIX.match(line)
                if prefix is None:
                    break
                line = line[prefix.end() :]
            if closing.match(line):
                self.blocks.append(
                    CodeBlock(
                        info=info,
                        content="\n".join(content),
                        line=self._line_no(index),
                        end_line=self._line_no(cursor),
                        fence=fence,
                    )
                )
                return cursor + 1
            content.append(line)
            cursor += 1

        self.blocks.append(
            CodeBlock(
                info=info,
                content="\n".join(content),
                line=self._line_no(index),
                end_line=self._line_no(cursor - 1),
                fence=fence,
                closed=False,
            )
        )
        self.issues.append(
            ParseIssue("unclosed-fence", f"Code fence opened with {fence} is never closed", self._line_no(index))
        )
        return cursor

    def _scan_indented_code(self, index: int) -> int:
        last = index
        cursor = index + 1
        while cursor < len(self._lines):
            line = self._lines[cursor]
            if line.strip():
                if _indent_width(line) < INDENTED_CODE_WIDTH:
                    break
                last = cursor
            cursor += 1

        content = [_dedent_code(line) for line in self._lines[index : last + 1]]
        self.blocks.append(
            CodeBlock(
                info="",
                content="\n".join(content),
                line=self._line_no(index),
                end_line=self._line_no(last),
                fence="",
            )
        )
        return last + 1

    def _skip_comment(self, index: int) -> int:
        start = self._lines[index].index("<!--") + len("<!--")
        cursor = index
        while cursor < len(self._lines):
            line = self._lines[cursor]
            end = line.find("-->", start if cursor == index else 0)
            if end != -1:
                rest = line[end + len("-->") :].strip()
                if not rest:
                    return cursor + 1
                # Scan whatever follows the comment on its closing line.
                self._lines[cursor] = rest
                return cursor
            cursor += 1
        LOGGER.warning("HTML comment opened on line %d is never closed", self._line_no(index))
        return len(self._lines)

    def _scan_table(self, index: int) -> int:
        header = split_table_row(self._lines[index])
        delimiter = split_table_row(self._lines[index + 1])
        alignments = [_alignment(cell) for cell in delimiter]
        table_line = self._line_no(index)
        if len(header) != len(delimiter):
            self.issues.append(
                ParseIssue(
                    "table-columns",
                    f"Table header has {len(header)} cells but the delimiter row has {len(delimiter)}",
                    self._line_no(index + 1),
                )
            )

        rows: List[List[str]] = []
        self.inline_lines.append((table_line, self._lines[index]))
        cursor = index + 2
        while cursor < len(self._lines):
            line = self._lines[cursor]
            if not line.strip() or "|" not in line or FENCE_OPEN.match(line) or ATX_HEADING.match(line):
                break
            cells = split_table_row(line)
            if len(cells) != len(header):
                self.issues.append(
                    ParseIssue(
                        "table-columns",
                        f"Table row has {len(cells)} cells, expected {len(header)}",
                        self._line_no(cursor),
                    )
                )
            rows.append(cells)
            self.inline_lines.append((self._line_no(cursor), line))
            cursor += 1

        self.blocks.append(TableBlock(header=header, rows=rows, line=table_line, alignments=alignments))
        return cursor


def split_table_row(line: str) -> List[str]:
    """Split a pipe table row into cells, honouring escapes and code spans."""
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]

    cells: List[str] = []
    current: List[str] = []
    in_code = False
    escaped = False
    for char in row:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            current.append(char)
            escaped = True
        elif char == "`":
            in_code = not in_code
            current.append(char)
        elif char == "|" and not in_code:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    cells.append("".join(current).strip())
    return cells


def _alignment(cell: str) -> Optional[str]:
    cell = cell.strip()
    if cell.startswith(":") and cell.endswith(":"):
        return "center"
    if cell.endswith(":"):
        return "right"
    if cell.startswith(":"):
        return "left"
    return None


def parse_markdown(text: str, source_path: str) -> Document:
    """Convenience wrapper around :class:`MarkdownParser`."""
    return MarkdownParser(text, source_path).parse()


def _indent_width(line: str) -> int:
    prefix = line[: len(line) - len(line.lstrip(" \t"))]
    return len(prefix.expandtabs(INDENTED_CODE_WIDTH))


def _dedent_code(line: str) -> str:
    expanded = line.expandtabs(INDENTED_CODE_WIDTH)
    return expanded[INDENTED_CODE_WIDTH:] if expanded.strip() else ""
