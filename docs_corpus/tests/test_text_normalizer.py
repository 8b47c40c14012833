"""Test cases for text normalization and heading slugs."""

import unittest

from docs_corpus.utils.slugger import Slugger, slugify
from docs_corpus.utils.text_normalizer import InlineMarkupStripper, TextNormalizer, normalize_markdown_text


class TextNormalizerTest(unittest.TestCase):
    """Test text normalization utilities."""

    def setUp(self):
        self.normalizer = TextNormalizer()

    def test_invisible_character_replacement(self):
        test_cases = [
            ('\u00a0text', 'text'),
            ('text\u2009word', 'text word'),
            ('zero\u200bwidth', 'zerowidth'),
            ('soft\u00adhyphen', 'softhyphen'),
            ('\ufeffbom', 'bom'),
        ]

        for input_text, expected in test_cases:
            result = self.normalizer.normalize_text(input_text)
            self.assertEqual(result, expected, f"Failed for input: {repr(input_text)}")

    def test_whitespace_normalization(self):
        self.assertEqual(self.normalizer.normalize_text('  multiple   spaces \n here '), 'multiple spaces here')

    def test_control_character_removal(self):
        self.assertEqual(self.normalizer.normalize_text('a\x00b\x1fc'), 'abc')


class InlineMarkupStripperTest(unittest.TestCase):
    """Inline Markdown reduced to visible text."""

    def setUp(self):
        self.stripper = InlineMarkupStripper()

    def test_emphasis_and_links(self):
        self.assertEqual(self.stripper.strip('**bold** and _it_ and ~~gone~~'), 'bold and it and gone')
        self.assertEqual(self.stripper.strip('[link](x.md) and ![img](y.png)'), 'link and img')

    def test_code_span_content_is_literal(self):
        self.assertEqual(self.stripper.strip('`a*b*c` stays'), 'a*b*c stays')

    def test_intraword_underscores_survive(self):
        self.assertEqual(self.stripper.strip('use_state_hook'), 'use_state_hook')

    def test_html_tags_removed(self):
        self.assertEqual(normalize_markdown_text('Hello <kbd>Ctrl</kbd>'), 'Hello Ctrl')

    def test_none_is_empty(self):
        self.assertEqual(normalize_markdown_text(None), '')


class SluggerTest(unittest.TestCase):
    """GitHub-style heading anchors."""

    def test_slugify(self):
        test_cases = [
            ('Hello World', 'hello-world'),
            ('Interface definition (API)', 'interface-definition-api'),
            ('`useState` hook', 'usestate-hook'),
            ("What's new?", 'whats-new'),
            ('C++ & Rust', 'c--rust'),
            ('Café Menü', 'café-menü'),
            ('snake_case name', 'snake_case-name'),
        ]
        for text, expected in test_cases:
            self.assertEqual(slugify(text), expected, f"Failed for heading: {text!r}")

    def test_duplicates_are_numbered(self):
        slugger = Slugger()

        self.assertEqual([slugger.slug('Intro') for _ in range(3)], ['intro', 'intro-1', 'intro-2'])

    def test_reserved_anchor_is_skipped(self):
        slugger = Slugger()
        slugger.reserve('intro')

        self.assertEqual(slugger.slug('Intro'), 'intro-1')


if __name__ == '__main__':
    unittest.main()
