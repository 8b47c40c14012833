"""Split and load the YAML front matter block at the top of a document."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

import yaml

from docs_corpus.model.elements import ParseIssue
from docs_corpus.utils.logger import get_logger

LOGGER = get_logger(__name__)

FRONT_MATTER_DELIMITER = "---"


@dataclass(slots=True)
class FrontMatter:
    """Loaded front matter plus the body that follows it."""

    data: Dict[str, object] = field(default_factory=dict)
    body: str = ""
    line_offset: int = 0
    issue: Optional[ParseIssue] = None


def split_front_matter(text: str) -> FrontMatter:
    """Separate a leading ``---`` delimited YAML block from the Markdown body.

    ``line_offset`` is the number of source lines consumed, so that line
    numbers in the body can be mapped back onto the file. A block that is
    opened but never closed is treated as ordinary Markdown.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != FRONT_MATTER_DELIMITER:
        return FrontMatter(body=text)

    for index in range(1, len(lines)):
        if lines[index].rstrip() == FRONT_MATTER_DELIMITER:
            break
    else:
        LOGGER.debug("Front matter opening delimiter without a closing one")
        return FrontMatter(body=text)

    raw = "".join(lines[1:index])
    body = "".join(lines[index + 1 :])
    offset = index + 1

    try:
        data = yaml.safe_load(raw) if raw.strip() else {}
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 2 if mark is not None else 1
        issue = ParseIssue("front-matter", f"Front matter is not valid YAML: {_first_line(exc)}", line)
        return FrontMatter(body=body, line_offset=offset, issue=issue)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        issue = ParseIssue("front-matter", f"Front matter must be a mapping, got {type(data).__name__}", 1)
        return FrontMatter(body=body, line_offset=offset, issue=issue)

    return FrontMatter(data={str(key): value for key, value in data.items()}, body=body, line_offset=offset)


def _first_line(exc: Exception) -> str:
    return str(exc).strip().splitlines()[0] if str(exc).strip() else exc.__class__.__name__
