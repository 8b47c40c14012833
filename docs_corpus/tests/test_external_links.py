"""Tests for the opt-in external link check; the network is mocked."""
import unittest
from pathlib import Path
from unittest import mock

import requests

from docs_corpus.checks.base import CheckContext
from docs_corpus.checks.external_links import ExternalLinkCheck, check_url, is_broken
from docs_corpus.config import ExternalLinkSettings, LintConfig
from docs_corpus.model.corpus_model import CorpusModel, DocumentCatalog
from docs_corpus.parser.markdown_parser import parse_markdown


def response(status: int) -> mock.Mock:
    result = mock.Mock()
    result.status_code = status
    return result


class CheckUrlTest(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = ExternalLinkSettings(enabled=True, timeout=2)

    @mock.patch("docs_corpus.checks.external_links.requests.get")
    @mock.patch("docs_corpus.checks.external_links.requests.head")
    def test_head_success(self, head: mock.Mock, get: mock.Mock) -> None:
        head.return_value = response(200)

        self.assertEqual(check_url("https://example.com", self.settings), ("https://example.com", 200))
        get.assert_not_called()
        _, kwargs = head.call_args
        self.assertEqual(kwargs["timeout"], 2)
        self.assertTrue(kwargs["allow_redirects"])

    @mock.patch("docs_corpus.checks.external_links.requests.get")
    @mock.patch("docs_corpus.checks.external_links.requests.head")
    def test_get_fallback(self, head: mock.Mock, get: mock.Mock) -> None:
        head.return_value = response(405)
        get.return_value = response(200)

        self.assertEqual(check_url("https://example.com", self.settings)[1], 200)
        get.return_value.close.assert_called_once_with()

    @mock.patch("docs_corpus.checks.external_links.requests.head")
    def test_request_exception(self, head: mock.Mock) -> None:
        head.side_effect = requests.ConnectionError("connection refused")

        url, status = check_url("https://down.example.com", self.settings)

        self.assertEqual(status, "connection refused")
        self.assertTrue(is_broken(status))

    def test_is_broken(self) -> None:
        self.assertFalse(is_broken(200))
        self.assertFalse(is_broken(301))
        self.assertTrue(is_broken(404))
        self.assertTrue(is_broken("timed out"))


class ExternalLinkCheckTest(unittest.TestCase):
    def build_context(self, enabled: bool = True) -> CheckContext:
        documents = [
            parse_markdown(
                "# A\n\n[ok](https://ok.example.com) [gone](https://gone.example.com)\n\n"
                "Again: https://gone.example.com and <mailto:me@example.com>\n",
                "a.md",
            ),
            parse_markdown("# B\n\n[gone](https://gone.example.com)\n", "b.md"),
        ]
        model = CorpusModel(root=Path("/project/docs"), documents=DocumentCatalog(documents))
        config = LintConfig(base_dir=Path("/project"))
        config.external_links.enabled = enabled
        return CheckContext(model=model, config=config)

    def test_disabled_by_default(self) -> None:
        self.assertFalse(ExternalLinkCheck().enabled(LintConfig(base_dir=Path("/project"))))

    @mock.patch("docs_corpus.checks.external_links.check_url")
    def test_each_url_checked_once_and_every_usage_reported(self, fake_check: mock.Mock) -> None:
        statuses = {"https://ok.example.com": 200, "https://gone.example.com": 404}
        fake_check.side_effect = lambda url, settings: (url, statuses[url])

        findings = list(ExternalLinkCheck().run(self.build_context()))

        checked = sorted(call.args[0] for call in fake_check.call_args_list)
        self.assertEqual(checked, ["https://gone.example.com", "https://ok.example.com"])
        self.assertEqual(
            sorted((f.path, f.line) for f in findings),
            [("a.md", 3), ("a.md", 5), ("b.md", 3)],
        )
        self.assertTrue(all(f.rule_id == "links/external-unreachable" for f in findings))
        self.assertIn("HTTP 404", findings[0].message)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
