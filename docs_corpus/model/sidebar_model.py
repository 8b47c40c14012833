"""Sidebar model captures the navigation trees that list documents."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Set, Tuple


@dataclass(slots=True)
class SidebarItem:
    """One node of a sidebar: a doc, a category, an external link or a generated folder."""

    kind: str
    label: Optional[str] = None
    doc_id: Optional[str] = None
    href: Optional[str] = None
    dir_name: Optional[str] = None
    items: List["SidebarItem"] = field(default_factory=list)

    def walk(self) -> Iterator["SidebarItem"]:
        yield self
        for child in self.items:
            yield from child.walk()


@dataclass(slots=True)
class Sidebar:
    """Named, ordered navigation tree."""

    name: str
    items: List[SidebarItem] = field(default_factory=list)

    def walk(self) -> Iterator[SidebarItem]:
        for item in self.items:
            yield from item.walk()


class SidebarCatalog:
    """Collection of sidebars keyed by name, in declaration order."""

    def __init__(self, sidebars: Mapping[str, Sidebar], source_path: Optional[str] = None) -> None:
        self._sidebars: Dict[str, Sidebar] = dict(sidebars)
        self.source_path = source_path

    def get(self, name: str) -> Optional[Sidebar]:
        return self._sidebars.get(name)

    def all(self) -> Mapping[str, Sidebar]:
        """Return read-only view of the sidebars."""
        return dict(self._sidebars)

    def doc_refs(self) -> Iterator[Tuple[Sidebar, SidebarItem]]:
        """Yield every item pointing at a doc id together with its sidebar."""
        for sidebar in self._sidebars.values():
            for item in sidebar.walk():
                if item.doc_id is not None:
                    yield sidebar, item

    def autogenerated_dirs(self) -> List[str]:
        return [
            item.dir_name or "."
            for sidebar in self._sidebars.values()
            for item in sidebar.walk()
            if item.kind == "autogenerated"
        ]

    def referenced_ids(self) -> Set[str]:
        return {item.doc_id for _, item in self.doc_refs() if item.doc_id}

    def __len__(self) -> int:
        return len(self._sidebars)
