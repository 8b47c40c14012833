"""Entry-point for the docs corpus linter."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence, Type

from docs_corpus.checks.runner import CorpusLinter
from docs_corpus.config import ConfigError, LintConfig, load_config
from docs_corpus.model.corpus_model import CorpusModel, DocumentCatalog
from docs_corpus.model.finding_model import LintReport
from docs_corpus.model.sidebar_model import SidebarCatalog
from docs_corpus.parser.corpus_loader import DocsCorpus
from docs_corpus.parser.markdown_parser import MarkdownParser
from docs_corpus.parser.sidebar_parser import SidebarError, SidebarParser
from docs_corpus.renderer.base import ReportRenderer
from docs_corpus.renderer.html_renderer import HtmlRenderer
from docs_corpus.renderer.json_renderer import JsonRenderer
from docs_corpus.renderer.text_renderer import TextRenderer
from docs_corpus.utils.debug import DebugDumper
from docs_corpus.utils.logger import get_logger, set_verbosity

LOGGER = get_logger(__name__)

DEFAULT_SIDEBAR_FILES = ("sidebars.yaml", "sidebars.yml", "sidebars.json")
RENDERERS: Dict[str, Type[ReportRenderer]] = {
    "text": TextRenderer,
    "json": JsonRenderer,
    "html": HtmlRenderer,
}

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2


def build_corpus_model(config: LintConfig) -> CorpusModel:
    """Load the docs root, parse every document and the sidebars into one model."""
    corpus = DocsCorpus.load(config.docs_root, config.extensions, config.exclude)
    documents = [MarkdownParser(corpus.require_source(path), path).parse() for path in corpus.paths()]
    return CorpusModel(
        root=corpus.root,
        documents=DocumentCatalog(documents),
        sidebars=load_sidebars(config),
        load_issues=list(corpus.load_issues),
        static_dirs=config.static_paths,
    )


def load_sidebars(config: LintConfig) -> Optional[SidebarCatalog]:
    """Parse the configured sidebars file, or a conventionally named one next to the config."""
    path = config.sidebars_path
    if path is None:
        for name in DEFAULT_SIDEBAR_FILES:
            candidate = config.base_dir / name
            if candidate.is_file():
                path = candidate
                break
        else:
            LOGGER.debug("No sidebars file; sidebar checks are skipped")
            return None
    return SidebarParser.from_file(path).parse()


def lint_corpus(model: CorpusModel, config: LintConfig) -> LintReport:
    """Run every enabled check over ``model``."""
    return CorpusLinter(config).lint(model)


def render_report(report: LintReport, fmt: str = "text", output: Optional[Path] = None) -> str:
    """Render the report in the requested format, writing it to ``output`` if given."""
    try:
        renderer_cls = RENDERERS[fmt]
    except KeyError:
        raise ValueError(f"Unknown report format: {fmt}") from None
    return renderer_cls(output).render(report)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs-corpus-lint",
        description="Check a Markdown documentation corpus for broken links, untagged code and malformed Markdown",
    )
    parser.add_argument("project", nargs="?", default=".", help="Project directory holding the docs and config")
    parser.add_argument("--config", help="Path to a .docs-lint.yaml file")
    parser.add_argument("--docs-dir", help="Docs directory relative to the project")
    parser.add_argument("--sidebars", help="Sidebars file (YAML or JSON) relative to the project")
    parser.add_argument("--format", choices=sorted(RENDERERS), default="text", help="Report format")
    parser.add_argument("--output", help="Write the report to this file instead of stdout")
    parser.add_argument("--external", action="store_true", help="Also check that external URLs are reachable")
    parser.add_argument("--strict", action="store_true", help="Fail on warnings as well as errors")
    parser.add_argument("--dump-model", metavar="DIR", help="Write the parsed corpus model as JSON into DIR")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the load → parse → check → render pipeline and return the exit code."""
    args = build_arg_parser().parse_args(argv)
    set_verbosity(args.verbose)

    project = Path(args.project).resolve()
    try:
        config = load_config(Path(args.config) if args.config else None, base_dir=project)
        config = config.with_overrides(docs_dir=args.docs_dir, sidebars=args.sidebars)
        if args.external:
            config.external_links.enabled = True
        LOGGER.info("Linting documents in %s", config.docs_root)
        model = build_corpus_model(config)
        report = lint_corpus(model, config)
    except (ConfigError, SidebarError, FileNotFoundError) as exc:
        LOGGER.error("%s", exc)
        return EXIT_USAGE

    if args.dump_model:
        DebugDumper(Path(args.dump_model)).dump(model)

    output = Path(args.output) if args.output else None
    text = render_report(report, args.format, output)
    if output is None:
        sys.stdout.write(text)
    return EXIT_FINDINGS if report.failed(strict=args.strict) else EXIT_OK


def run() -> None:  # pragma: no cover
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run()
