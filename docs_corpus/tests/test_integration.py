"""End-to-end tests of the command line entry point."""
import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from docs_corpus.config import load_config
from docs_corpus.main import EXIT_FINDINGS, EXIT_OK, EXIT_USAGE, build_corpus_model, lint_corpus, main, render_report

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def run_main(*argv: str):
    buffer = io.StringIO()
    with redirect_stdout(buffer):
        code = main(list(argv))
    return code, buffer.getvalue()


class ShippedCorpusTest(unittest.TestCase):
    """The sample docs in the repository lint clean."""

    def test_sample_corpus_is_clean(self) -> None:
        code, output = run_main(str(PROJECT_ROOT), "--strict")

        self.assertEqual(code, EXIT_OK, output)
        self.assertEqual(output.strip(), "4 documents checked: 0 errors, 0 warnings")

    def test_model_of_sample_corpus(self) -> None:
        config = load_config(base_dir=PROJECT_ROOT)
        model = build_corpus_model(config)

        self.assertEqual(
            model.documents.ids(),
            [
                "behavior-interview/tell-me-about-yourself",
                "frontend-system-design/radio-framework",
                "frontend-system-design/autocomplete",
                "intro",
            ],
        )
        autocomplete = model.documents.get("frontend-system-design/autocomplete")
        self.assertEqual(autocomplete.title, "Autocomplete")
        self.assertEqual([block.language for block in autocomplete.code_blocks], ["jsx"])
        self.assertIn("interface-definition-api", model.documents.get("frontend-system-design/radio-framework").anchors)
        self.assertEqual(len(model.sidebars), 1)
        self.assertFalse(lint_corpus(model, config).findings)


class BrokenProjectTest(unittest.TestCase):
    """A temporary project with deliberate problems."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name)
        self.docs = self.project / "docs"
        self.docs.mkdir()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write(self, relative: str, text: str) -> None:
        path = self.project / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    def test_errors_fail_the_run(self) -> None:
        self.write("docs/a.md", "# A\n\n[b](./b.md#missing)\n\n```\nuntagged\n```\n")
        self.write("docs/b.md", "# B\n")

        code, output = run_main(str(self.project))

        self.assertEqual(code, EXIT_FINDINGS)
        self.assertIn("a.md:3: error [links/broken-anchor]", output)
        self.assertIn("a.md:5: error [code/missing-language]", output)
        self.assertIn("2 documents checked: 2 errors, 0 warnings", output)

    def test_warnings_fail_only_in_strict_mode(self) -> None:
        self.write("docs/a.md", "## Untitled\n")

        self.assertEqual(run_main(str(self.project))[0], EXIT_OK)
        self.assertEqual(run_main(str(self.project), "--strict")[0], EXIT_FINDINGS)

    def test_config_rule_levels_apply(self) -> None:
        self.write("docs/a.md", "## Untitled\n")
        self.write(".docs-lint.yaml", "rules:\n  structure/missing-title: error\n")

        code, output = run_main(str(self.project))

        self.assertEqual(code, EXIT_FINDINGS)
        self.assertIn("error [structure/missing-title]", output)

    def test_sidebars_are_discovered(self) -> None:
        self.write("docs/a.md", "# A\n")
        self.write("docs/b.md", "# B\n")
        self.write("sidebars.json", json.dumps({"main": ["a", "c"]}))

        code, output = run_main(str(self.project))

        self.assertEqual(code, EXIT_FINDINGS)
        self.assertIn("sidebars.json: error [sidebar/unknown-document]", output)
        self.assertIn("b.md: warning [sidebar/orphan-document]", output)

    def test_json_output_file(self) -> None:
        self.write("docs/a.md", "# A\n\n[x](./nope.md)\n")
        output = self.project / "out" / "report.json"

        code, stdout = run_main(str(self.project), "--format", "json", "--output", str(output))

        self.assertEqual(code, EXIT_FINDINGS)
        self.assertEqual(stdout, "")
        payload = json.loads(output.read_text(encoding="utf-8"))
        self.assertEqual([finding["rule"] for finding in payload["findings"]], ["links/broken-document"])

    def test_dump_model(self) -> None:
        self.write("docs/a.md", "---\ntitle: A\n---\n## Part\n")
        dump_dir = self.project / "debug"

        code, _ = run_main(str(self.project), "--dump-model", str(dump_dir))

        self.assertEqual(code, EXIT_OK)
        payload = json.loads((dump_dir / "corpus_model.json").read_text(encoding="utf-8"))
        document = payload["documents"][0]
        self.assertEqual(document["doc_id"], "a")
        self.assertEqual(document["blocks"][0]["type"], "HeadingBlock")
        self.assertEqual(document["anchors"], ["part"])

    def test_usage_errors(self) -> None:
        self.assertEqual(run_main(str(self.project / "missing"))[0], EXIT_USAGE)

        self.write(".docs-lint.yaml", "unknown: 1\n")
        self.assertEqual(run_main(str(self.project))[0], EXIT_USAGE)

    def test_unknown_rule_id_in_config(self) -> None:
        self.write("docs/a.md", "# A\n")
        self.write(".docs-lint.yaml", "rules:\n  links/typo: off\n")

        self.assertEqual(run_main(str(self.project))[0], EXIT_USAGE)

    def test_invalid_sidebars(self) -> None:
        self.write("docs/a.md", "# A\n")
        self.write("sidebars.yaml", "main: [{type: mystery}]\n")

        self.assertEqual(run_main(str(self.project))[0], EXIT_USAGE)

    def test_sidebars_not_utf8(self) -> None:
        self.write("docs/a.md", "# A\n")
        (self.project / "sidebars.yaml").write_bytes(b"main:\n  - caf\xe9\n")

        self.assertEqual(run_main(str(self.project))[0], EXIT_USAGE)

    def test_render_report_unknown_format(self) -> None:
        config = load_config(base_dir=self.project)
        report = lint_corpus(build_corpus_model(config), config)

        with self.assertRaises(ValueError):
            render_report(report, "xml")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
