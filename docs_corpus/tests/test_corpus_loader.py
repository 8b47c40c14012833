"""Tests for reading a docs root from disk."""
import tempfile
import unittest
from pathlib import Path

from docs_corpus.parser.corpus_loader import DocsCorpus


class DocsCorpusTest(unittest.TestCase):
    """Walk a temporary docs root."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write(self, relative: str, content: bytes) -> None:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def test_loads_markdown_files_only(self) -> None:
        self.write("intro.md", b"# Intro\n")
        self.write("react/01-hooks.mdx", b"# Hooks\n")
        self.write("img/diagram.png", b"\x89PNG")
        self.write("notes.txt", b"plain")

        corpus = DocsCorpus.load(self.root)

        self.assertEqual(corpus.paths(), ["intro.md", "react/01-hooks.mdx"])
        self.assertEqual(corpus.require_source("intro.md"), "# Intro\n")
        self.assertEqual(corpus.load_issues, [])

    def test_hidden_and_vendor_directories_are_skipped(self) -> None:
        self.write(".docusaurus/cache.md", b"# cache\n")
        self.write("node_modules/pkg/README.md", b"# pkg\n")
        self.write("guide.md", b"# Guide\n")

        corpus = DocsCorpus.load(self.root)

        self.assertEqual(corpus.paths(), ["guide.md"])

    def test_exclude_patterns(self) -> None:
        self.write("guide.md", b"# Guide\n")
        self.write("drafts/wip.md", b"# WIP\n")

        corpus = DocsCorpus.load(self.root, exclude=["drafts/*"])

        self.assertEqual(corpus.paths(), ["guide.md"])

    def test_extensions_filter(self) -> None:
        self.write("a.md", b"# A\n")
        self.write("b.mdx", b"# B\n")

        corpus = DocsCorpus.load(self.root, extensions=[".md"])

        self.assertEqual(corpus.paths(), ["a.md"])

    def test_invalid_utf8_becomes_load_issue(self) -> None:
        self.write("broken.md", b"# Title\n\ncaf\xe9\n")

        corpus = DocsCorpus.load(self.root)

        self.assertEqual(corpus.paths(), [])
        self.assertEqual(len(corpus.load_issues), 1)
        issue = corpus.load_issues[0]
        self.assertEqual(issue.source_path, "broken.md")
        self.assertEqual(issue.issue.code, "encoding")
        self.assertEqual(issue.issue.line, 3)

    def test_byte_order_mark_is_dropped(self) -> None:
        self.write("bom.md", "\ufeff# Title\n".encode("utf-8"))

        corpus = DocsCorpus.load(self.root)

        self.assertEqual(corpus.require_source("bom.md"), "# Title\n")

    def test_missing_root(self) -> None:
        with self.assertRaises(FileNotFoundError):
            DocsCorpus.load(self.root / "absent")

    def test_require_source_unknown_path(self) -> None:
        self.write("a.md", b"# A\n")
        corpus = DocsCorpus.load(self.root)

        with self.assertRaises(KeyError):
            corpus.require_source("b.md")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
