"""GitHub-style heading slugs, matching the anchors a docs site generates."""
from __future__ import annotations

import re
from typing import Dict

from docs_corpus.utils.text_normalizer import normalize_markdown_text

_REMOVED_CHARS = re.compile(r"[^\w\- ]", re.UNICODE)


def slugify(text: str) -> str:
    """Return the bare slug for ``text`` without de-duplication."""
    plain = normalize_markdown_text(text).lower()
    return _REMOVED_CHARS.sub("", plain).replace(" ", "-")


class Slugger:
    """Generates unique slugs within one document.

    Repeated headings get ``-1``, ``-2`` ... suffixes in document order.
    """

    def __init__(self) -> None:
        self._occurrences: Dict[str, int] = {}

    def slug(self, text: str) -> str:
        original = slugify(text)
        result = original
        while result in self._occurrences:
            self._occurrences[original] += 1
            result = f"{original}-{self._occurrences[original]}"
        self._occurrences[result] = 0
        return result

    def reserve(self, anchor: str) -> None:
        """Mark an explicit anchor as taken so generated slugs avoid it."""
        self._occurrences.setdefault(anchor, 0)
