"""Tests for sidebar parsing."""
import json
import tempfile
import unittest
from pathlib import Path

from docs_corpus.parser.sidebar_parser import SidebarError, SidebarParser


SIDEBARS = {
    "frontendSystemDesignSidebar": [
        "frontend-system-design/intro",
        {
            "type": "category",
            "label": "Search & Navigation",
            "link": {"type": "doc", "id": "frontend-system-design/search-overview"},
            "items": [
                "frontend-system-design/autocomplete",
                {"type": "doc", "id": "frontend-system-design/dropdown-menu", "label": "Dropdown"},
            ],
        },
        {"type": "link", "label": "Docusaurus", "href": "https://docusaurus.io"},
    ],
    "reactSidebar": [
        {"Overview": ["react-interview/react-interview-intro"]},
        {"type": "autogenerated", "dirName": "react-interview"},
    ],
}


class SidebarParserTest(unittest.TestCase):
    """Validate item shapes and catalog queries."""

    def test_parse_item_shapes(self) -> None:
        catalog = SidebarParser(SIDEBARS).parse()

        self.assertEqual(len(catalog), 2)
        fsd = catalog.get("frontendSystemDesignSidebar")
        self.assertEqual([item.kind for item in fsd.items], ["doc", "category", "link"])
        category = fsd.items[1]
        self.assertEqual(category.label, "Search & Navigation")
        self.assertEqual(
            [item.doc_id for item in category.items],
            [
                "frontend-system-design/search-overview",
                "frontend-system-design/autocomplete",
                "frontend-system-design/dropdown-menu",
            ],
        )
        self.assertEqual(fsd.items[2].href, "https://docusaurus.io")

    def test_shorthand_and_autogenerated(self) -> None:
        catalog = SidebarParser(SIDEBARS).parse()

        react = catalog.get("reactSidebar")
        self.assertEqual(react.items[0].kind, "category")
        self.assertEqual(react.items[0].label, "Overview")
        self.assertEqual(catalog.autogenerated_dirs(), ["react-interview"])

    def test_doc_refs_in_order(self) -> None:
        catalog = SidebarParser(SIDEBARS).parse()

        refs = [(sidebar.name, item.doc_id) for sidebar, item in catalog.doc_refs()]
        self.assertEqual(refs[0], ("frontendSystemDesignSidebar", "frontend-system-design/intro"))
        self.assertEqual(refs[-1], ("reactSidebar", "react-interview/react-interview-intro"))
        self.assertIn("frontend-system-design/dropdown-menu", catalog.referenced_ids())

    def test_top_level_category_shorthand(self) -> None:
        catalog = SidebarParser({"docs": {"Getting started": ["intro"], "Guides": ["a", "b"]}}).parse()

        labels = [item.label for item in catalog.get("docs").items]
        self.assertEqual(labels, ["Getting started", "Guides"])
        self.assertEqual(catalog.referenced_ids(), {"intro", "a", "b"})

    def test_invalid_shapes_raise(self) -> None:
        invalid = [
            ["not", "a", "mapping"],
            {"docs": "intro"},
            {"docs": [42]},
            {"docs": [{"type": "category", "items": []}]},
            {"docs": [{"type": "mystery"}]},
            {"docs": [{"type": "doc"}]},
            {"docs": [{"label": "x", "items": []}]},
        ]
        for data in invalid:
            with self.assertRaises(SidebarError, msg=repr(data)):
                SidebarParser(data).parse()


class SidebarFileTest(unittest.TestCase):
    """Loading sidebars from YAML and JSON files."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_yaml_file(self) -> None:
        path = self.root / "sidebars.yaml"
        path.write_text("guides:\n  - intro\n  - type: category\n    label: More\n    items: [a]\n", encoding="utf-8")

        catalog = SidebarParser.from_file(path).parse()

        self.assertEqual(catalog.referenced_ids(), {"intro", "a"})
        self.assertEqual(catalog.source_path, str(path))

    def test_json_file(self) -> None:
        path = self.root / "sidebars.json"
        path.write_text(json.dumps(SIDEBARS), encoding="utf-8")

        catalog = SidebarParser.from_file(path).parse()

        self.assertEqual(len(catalog), 2)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            SidebarParser.from_file(self.root / "absent.yaml")

    def test_unreadable_file(self) -> None:
        path = self.root / "sidebars.yaml"
        path.write_text("guides: [unclosed\n", encoding="utf-8")

        with self.assertRaises(SidebarError):
            SidebarParser.from_file(path)

    def test_file_that_is_not_utf8(self) -> None:
        path = self.root / "sidebars.yaml"
        path.write_bytes(b"guides:\n  - caf\xe9\n")

        with self.assertRaises(SidebarError):
            SidebarParser.from_file(path)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
