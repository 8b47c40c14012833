"""Tests for front matter splitting."""
import unittest

from docs_corpus.parser.front_matter import split_front_matter


class FrontMatterTest(unittest.TestCase):
    """Validate YAML front matter handling and line offsets."""

    def test_document_without_front_matter(self) -> None:
        result = split_front_matter("# Title\n")

        self.assertEqual(result.data, {})
        self.assertEqual(result.body, "# Title\n")
        self.assertEqual(result.line_offset, 0)
        self.assertIsNone(result.issue)

    def test_front_matter_is_loaded(self) -> None:
        result = split_front_matter("---\ntitle: Chat app\nsidebar_position: 3\n---\nBody\n")

        self.assertEqual(result.data, {"title": "Chat app", "sidebar_position": 3})
        self.assertEqual(result.body, "Body\n")
        self.assertEqual(result.line_offset, 4)

    def test_empty_front_matter(self) -> None:
        result = split_front_matter("---\n---\nBody\n")

        self.assertEqual(result.data, {})
        self.assertEqual(result.line_offset, 2)
        self.assertIsNone(result.issue)

    def test_invalid_yaml_is_reported(self) -> None:
        result = split_front_matter("---\ntitle: [unclosed\n---\nBody\n")

        self.assertIsNotNone(result.issue)
        self.assertEqual(result.issue.code, "front-matter")
        self.assertEqual(result.data, {})
        self.assertEqual(result.body, "Body\n")

    def test_non_mapping_front_matter_is_reported(self) -> None:
        result = split_front_matter("---\n- a\n- b\n---\nBody\n")

        self.assertIn("must be a mapping", result.issue.message)

    def test_unterminated_block_is_plain_markdown(self) -> None:
        text = "---\ntitle: nope\n\nBody\n"
        result = split_front_matter(text)

        self.assertEqual(result.body, text)
        self.assertEqual(result.data, {})
        self.assertIsNone(result.issue)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
