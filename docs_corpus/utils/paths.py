"""Helpers for doc ids and link targets."""
from __future__ import annotations

import posixpath
import re
from pathlib import PurePosixPath
from typing import Mapping, Optional, Tuple
from urllib.parse import unquote

NUMBER_PREFIX_PATTERN = re.compile(r"^(?P<number>\d+)\s*[-_.]+\s*(?P<suffix>[^-_.\s].*)$")
DATE_LIKE_PATTERN = re.compile(r"^(?:\d{2}|\d{4})[-_.]\d{2}(?:[-_.]\d{2})?(?:[-_.]|$)")
EXTERNAL_PATTERN = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)")

MARKDOWN_SUFFIXES = (".md", ".mdx")


def strip_number_prefix(name: str) -> str:
    """Drop an ordering prefix such as ``08-`` from a file or folder name."""
    if DATE_LIKE_PATTERN.match(name):
        return name
    match = NUMBER_PREFIX_PATTERN.match(name)
    if match is None:
        return name
    return match.group("suffix")


def doc_id_for(source_path: str, front_matter: Optional[Mapping[str, object]] = None) -> str:
    """Compute the doc id of a document from its path relative to the docs root."""
    path = PurePosixPath(source_path)
    segments = [strip_number_prefix(part) for part in path.parent.parts]
    segments.append(strip_number_prefix(path.stem))
    custom_id = (front_matter or {}).get("id")
    if custom_id is not None and str(custom_id).strip():
        segments[-1] = str(custom_id).strip()
    return "/".join(segment for segment in segments if segment not in ("", "."))


def is_external(target: str) -> bool:
    """True for targets carrying a URL scheme or a protocol-relative prefix."""
    return bool(EXTERNAL_PATTERN.match(target))


def split_fragment(target: str) -> Tuple[str, Optional[str]]:
    """Split ``path#fragment`` into its URL-decoded parts.

    A query string is dropped; it has no meaning for files on disk.
    """
    href, _, fragment = target.partition("#")
    href = href.split("?", 1)[0]
    return unquote(href), (unquote(fragment) if fragment else None)


def resolve_relative(source_path: str, href: str) -> str:
    """Resolve ``href`` against the directory of ``source_path``.

    The result is a normalized POSIX path relative to the docs root; it may
    start with ``..`` when the link leaves the root.
    """
    base_dir = posixpath.dirname(source_path)
    joined = posixpath.join(base_dir, href) if base_dir else href
    return posixpath.normpath(joined)


def has_markdown_suffix(path: str) -> bool:
    return path.lower().endswith(MARKDOWN_SUFFIXES)
