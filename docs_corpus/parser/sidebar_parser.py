"""Parse a sidebars file into a catalog of navigation trees."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from docs_corpus.model.sidebar_model import Sidebar, SidebarCatalog, SidebarItem
from docs_corpus.utils.logger import get_logger

LOGGER = get_logger(__name__)


class SidebarError(ValueError):
    """Raised when a sidebars file does not have a recognised shape."""


class SidebarParser:
    """Parse a Docusaurus-shaped sidebars mapping.

    Every sidebar is a list of items. An item is a doc id string, a mapping
    with a ``type`` of ``doc``, ``category``, ``link`` or ``autogenerated``,
    or the category shorthand ``{"Label": [items]}``.
    """

    def __init__(self, data: Any, source_path: str | None = None) -> None:
        self._data = data
        self._source_path = source_path

    @classmethod
    def from_file(cls, path: Path) -> "SidebarParser":
        """Load a YAML or JSON sidebars file."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Sidebars file not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
            raise SidebarError(f"Cannot read sidebars file {path}: {exc}") from exc
        return cls(data, source_path=str(path))

    def parse(self) -> SidebarCatalog:
        """Return the parsed sidebars keyed by name."""
        if not isinstance(self._data, Mapping):
            raise SidebarError("Sidebars file must map sidebar names to item lists")

        sidebars: Dict[str, Sidebar] = {}
        for name, items in self._data.items():
            sidebars[str(name)] = Sidebar(name=str(name), items=self._parse_items(items, str(name)))
        LOGGER.debug("Parsed %d sidebars", len(sidebars))
        return SidebarCatalog(sidebars, source_path=self._source_path)

    def _parse_items(self, items: Any, where: str) -> List[SidebarItem]:
        if isinstance(items, Mapping):
            # Top-level shorthand: {"Category": [...], "Other": [...]}
            return [self._parse_shorthand(label, value, where) for label, value in items.items()]
        if not isinstance(items, list):
            raise SidebarError(f"{where}: expected a list of items, got {type(items).__name__}")
        return [self._parse_item(item, f"{where}[{index}]") for index, item in enumerate(items)]

    def _parse_item(self, item: Any, where: str) -> SidebarItem:
        if isinstance(item, str):
            return SidebarItem(kind="doc", doc_id=item)
        if not isinstance(item, Mapping):
            raise SidebarError(f"{where}: unsupported sidebar item {item!r}")

        if "type" not in item:
            if len(item) == 1:
                label, value = next(iter(item.items()))
                return self._parse_shorthand(label, value, where)
            raise SidebarError(f"{where}: sidebar item without a type")

        kind = item["type"]
        if kind in ("doc", "ref"):
            return SidebarItem(kind="doc", doc_id=self._require(item, "id", where), label=item.get("label"))
        if kind == "category":
            category = SidebarItem(
                kind="category",
                label=self._require(item, "label", where),
                items=self._parse_items(item.get("items", []), f"{where}.items"),
            )
            link = item.get("link")
            if isinstance(link, Mapping) and link.get("type") == "doc":
                category.items.insert(0, SidebarItem(kind="doc", doc_id=self._require(link, "id", f"{where}.link")))
            return category
        if kind == "link":
            return SidebarItem(kind="link", label=item.get("label"), href=self._require(item, "href", where))
        if kind == "autogenerated":
            return SidebarItem(kind="autogenerated", dir_name=str(item.get("dirName", ".")))
        if kind == "html":
            return SidebarItem(kind="html", label=item.get("value"))
        raise SidebarError(f"{where}: unknown sidebar item type {kind!r}")

    def _parse_shorthand(self, label: Any, value: Any, where: str) -> SidebarItem:
        return SidebarItem(kind="category", label=str(label), items=self._parse_items(value, f"{where}.{label}"))

    @staticmethod
    def _require(item: Mapping, key: str, where: str) -> str:
        value = item.get(key)
        if value is None or not str(value).strip():
            raise SidebarError(f"{where}: missing required key {key!r}")
        return str(value)
