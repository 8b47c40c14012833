"""
Text normalization utilities for Markdown parsing.

Handles inline markup stripping, whitespace normalization, and removal of
invisible characters for heading text and link labels.
"""

import re
from typing import Optional


class TextNormalizer:
    """Normalizes text content extracted from Markdown source."""

    # Invisible characters that editors tend to leave behind
    SPECIAL_CHARS = {
        '\u00a0': ' ',      # Non-breaking space → regular space
        '\u2009': ' ',      # Thin space → regular space
        '\u2007': ' ',      # Figure space → regular space
        '\u2008': ' ',      # Punctuation space → regular space
        '\u200b': '',       # Zero-width space → remove
        '\u200c': '',       # Zero-width non-joiner → remove
        '\u200d': '',       # Zero-width joiner → remove
        '\ufeff': '',       # Byte order mark → remove
        '\u00ad': '',       # Soft hyphen → remove
    }

    # Regex for collapsing multiple whitespace characters
    WHITESPACE_PATTERN = re.compile(r'\s+')

    # Regex for removing control characters (except tabs, newlines, carriage returns)
    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')

    def normalize_text(self, text: str) -> str:
        """Normalize a fragment of Markdown source text."""
        if not text:
            return text

        normalized = self._replace_special_chars(text)
        normalized = self._remove_control_chars(normalized)

        return self._normalize_whitespace(normalized)

    def _replace_special_chars(self, text: str) -> str:
        for original, replacement in self.SPECIAL_CHARS.items():
            text = text.replace(original, replacement)
        return text

    def _remove_control_chars(self, text: str) -> str:
        return self.CONTROL_CHARS_PATTERN.sub('', text)

    def _normalize_whitespace(self, text: str) -> str:
        normalized = self.WHITESPACE_PATTERN.sub(' ', text)
        return normalized.strip()


class InlineMarkupStripper:
    """Reduces inline Markdown to the text a reader would see."""

    CODE_SPAN_PATTERN = re.compile(r'(`+)(.+?)\1', re.DOTALL)
    IMAGE_PATTERN = re.compile(r'!\[([^\]]*)\]\([^)]*\)')
    LINK_PATTERN = re.compile(r'\[([^\]]*)\]\([^)]*\)')
    REFERENCE_LINK_PATTERN = re.compile(r'\[([^\]]+)\]\[[^\]]*\]')
    HTML_TAG_PATTERN = re.compile(r'</?[A-Za-z][^>]*>')
    EMPHASIS_PATTERN = re.compile(r"(\*{1,3}|~~)(?=\S)(.+?)(?<=\S)\1")
    UNDERSCORE_EMPHASIS_PATTERN = re.compile(r"(?<!\w)(_{1,3})(?=\S)(.+?)(?<=\S)\1(?!\w)")

    def strip(self, text: str) -> str:
        """Return ``text`` with inline markup removed."""
        if not text:
            return text

        # Code spans are literal: hold them aside so their content is not
        # mistaken for emphasis or links.
        spans = []

        def hold(match: re.Match) -> str:
            spans.append(match.group(2).strip())
            return f'\x00{len(spans) - 1}\x00'

        stripped = self.CODE_SPAN_PATTERN.sub(hold, text)
        stripped = self.IMAGE_PATTERN.sub(r'\1', stripped)
        stripped = self.LINK_PATTERN.sub(r'\1', stripped)
        stripped = self.REFERENCE_LINK_PATTERN.sub(r'\1', stripped)
        stripped = self.HTML_TAG_PATTERN.sub('', stripped)

        previous = None
        while previous != stripped:
            previous = stripped
            stripped = self.EMPHASIS_PATTERN.sub(r"\2", stripped)
            stripped = self.UNDERSCORE_EMPHASIS_PATTERN.sub(r"\2", stripped)

        return re.sub(r'\x00(\d+)\x00', lambda m: spans[int(m.group(1))], stripped)


def normalize_markdown_text(text: Optional[str]) -> str:
    """Convenience function to turn inline Markdown into plain text.

    Args:
        text: Markdown fragment to normalize

    Returns:
        Normalized text string
    """
    if text is None:
        return ""

    return TextNormalizer().normalize_text(InlineMarkupStripper().strip(text))
