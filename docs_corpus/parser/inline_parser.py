"""Extract links, images and HTML anchors from inline Markdown text."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from docs_corpus.model.elements import LinkReference, ParseIssue
from docs_corpus.utils.logger import get_logger
from docs_corpus.utils.text_normalizer import normalize_markdown_text

LOGGER = get_logger(__name__)

CODE_SPAN = re.compile(r"(`+)(?!`).+?(?<!`)\1(?!`)")
CODE_SPAN_OR_COMMENT = re.compile(r"(?P<code>(`+)(?!`)[\s\S]+?(?<!`)\2(?!`))|(?P<comment><!--[\s\S]*?-->)")
AUTOLINK = re.compile(r"<([a-zA-Z][a-zA-Z0-9+.-]{1,31}:[^\s<>]*)>")
HTML_TAG = re.compile(r"<([A-Za-z][A-Za-z0-9-]*)(\s[^<>]*)?/?>")
HTML_ATTR = re.compile(r"""\b([A-Za-z_:][-A-Za-z0-9_:.]*)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
INLINE_LINK = re.compile(
    r"(?P<bang>!?)\[(?P<text>(?:[^\[\]\\]|\\.|\[[^\[\]]*\])*)\]"
    r"\(\s*(?P<dest><[^<>\n]*>|(?:[^\s()\\]|\\.|\([^\s()]*\))*)"
    r"(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^()]*\)))?\s*\)"
)
REFERENCE_LINK = re.compile(r"(?P<bang>!?)\[(?P<text>[^\[\]]+)\]\[(?P<label>[^\[\]]*)\]")
SHORTCUT_REFERENCE = re.compile(r"(?<![\]\\])(?P<bang>!?)\[(?P<label>[^\[\]^][^\[\]]*)\](?![\[(:])")
BARE_URL = re.compile(r"\bhttps?://[^\s<>\[\]]+")
REFERENCE_DEFINITION = re.compile(
    r"^ {0,3}\[(?P<label>[^\[\]^][^\[\]]*)\]:\s*(?P<dest><[^<>]*>|\S+)"
    r"(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^()]*\)))?\s*$"
)
TRAILING_PUNCTUATION = ".,;:!?'\""


def normalize_label(label: str) -> str:
    """Case-fold and collapse whitespace the way reference labels are matched."""
    return " ".join(label.split()).casefold()


def parse_definition(line: str) -> Optional[Tuple[str, str]]:
    """Return ``(label, target)`` when ``line`` is a link reference definition."""
    match = REFERENCE_DEFINITION.match(line)
    if match is None:
        return None
    return normalize_label(match.group("label")), _clean_destination(match.group("dest"))


@dataclass(slots=True)
class InlineScanResult:
    """Everything the inline scanner found in one document."""

    links: List[LinkReference] = field(default_factory=list)
    anchors: Set[str] = field(default_factory=set)
    issues: List[ParseIssue] = field(default_factory=list)


class InlineScanner:
    """Scans text lines for links, images and ``id`` anchors.

    Reference definitions must be collected up front, since a definition may
    appear after the links that use it.
    """

    def __init__(self, definitions: Optional[Dict[str, str]] = None) -> None:
        self._definitions = dict(definitions or {})

    def scan(self, lines: Iterable[Tuple[int, str]]) -> InlineScanResult:
        result = InlineScanResult()
        for line_no, text in lines:
            self._scan_line(line_no, text, result)
        return result

    def _scan_line(self, line_no: int, text: str, result: InlineScanResult) -> None:
        masked = _mask(CODE_SPAN, mask_html_comments(text))

        # Before HTML and autolinks: a destination may be written as <target>.
        for match in INLINE_LINK.finditer(masked):
            self._add_inline_link(match, line_no, result)
        masked = _mask(INLINE_LINK, masked)

        for match in AUTOLINK.finditer(masked):
            result.links.append(LinkReference(match.group(1), match.group(1), line_no, origin="autolink"))
        masked = _mask(AUTOLINK, masked)

        for match in HTML_TAG.finditer(masked):
            self._scan_html_tag(match, line_no, result)
        masked = _mask(HTML_TAG, masked)

        for match in REFERENCE_LINK.finditer(masked):
            label = match.group("label") or match.group("text")
            self._add_reference(match, label, line_no, result, report_missing=True)
        masked = _mask(REFERENCE_LINK, masked)

        for match in SHORTCUT_REFERENCE.finditer(masked):
            # A bare ``[text]`` is only a link when a definition exists.
            self._add_reference(match, match.group("label"), line_no, result, report_missing=False)
        masked = _mask(SHORTCUT_REFERENCE, masked)

        for match in BARE_URL.finditer(masked):
            url = match.group(0).rstrip(TRAILING_PUNCTUATION)
            if url.endswith(")") and url.count("(") < url.count(")"):
                url = url[:-1]
            result.links.append(LinkReference(url, url, line_no, origin="autolink"))

    def _add_inline_link(self, match: re.Match, line_no: int, result: InlineScanResult) -> None:
        text = match.group("text")
        result.links.append(
            LinkReference(
                target=_clean_destination(match.group("dest")),
                text=normalize_markdown_text(text),
                line=line_no,
                is_image=bool(match.group("bang")),
            )
        )
        # Badge pattern: an image nested in the text of a link.
        for nested in INLINE_LINK.finditer(text):
            self._add_inline_link(nested, line_no, result)
        for tag in HTML_TAG.finditer(_mask(INLINE_LINK, text)):
            self._scan_html_tag(tag, line_no, result)

    def _add_reference(
        self, match: re.Match, label: str, line_no: int, result: InlineScanResult, *, report_missing: bool
    ) -> None:
        key = normalize_label(label)
        target = self._definitions.get(key)
        if target is None:
            if report_missing:
                result.issues.append(
                    ParseIssue("undefined-reference", f"Reference link label [{label}] is not defined", line_no)
                )
            return
        text = match.group("text") if "text" in match.groupdict() else label
        result.links.append(
            LinkReference(
                target=target,
                text=normalize_markdown_text(text),
                line=line_no,
                is_image=bool(match.group("bang")),
                origin="reference",
            )
        )

    def _scan_html_tag(self, match: re.Match, line_no: int, result: InlineScanResult) -> None:
        tag = match.group(1).lower()
        attributes = {
            name.lower(): double or single
            for name, double, single in HTML_ATTR.findall(match.group(2) or "")
        }
        if attributes.get("id"):
            result.anchors.add(attributes["id"])
        if tag == "a" and attributes.get("name"):
            result.anchors.add(attributes["name"])
        if tag == "a" and attributes.get("href"):
            result.links.append(LinkReference(attributes["href"], "", line_no, origin="html"))
        elif tag in ("img", "source") and attributes.get("src"):
            result.links.append(
                LinkReference(attributes["src"], attributes.get("alt", ""), line_no, is_image=True, origin="html")
            )
        else:
            LOGGER.debug("Ignoring HTML tag <%s> on line %d", tag, line_no)


def mask_html_comments(text: str) -> str:
    """Blank out HTML comments, keeping line breaks and code spans intact."""

    def replace(match: re.Match) -> str:
        if match.group("comment") is None:
            return match.group(0)
        return re.sub(r"[^\n]", " ", match.group(0))

    return CODE_SPAN_OR_COMMENT.sub(replace, text)


def _mask(pattern: re.Pattern, text: str) -> str:
    return pattern.sub(lambda match: " " * len(match.group(0)), text)


def _clean_destination(dest: str) -> str:
    dest = dest.strip()
    if dest.startswith("<") and dest.endswith(">"):
        dest = dest[1:-1]
    return re.sub(r"\\(.)", r"\1", dest).strip()
