"""Fenced code block hygiene."""
from __future__ import annotations

from typing import Iterator

from docs_corpus.checks.base import Check, CheckContext, RuleInfo
from docs_corpus.model.finding_model import Finding, Severity


class CodeLanguageCheck(Check):
    """Every fenced code block is tagged with a language identifier."""

    rules = (
        RuleInfo("code/missing-language", Severity.ERROR, "Fenced code blocks declare a language"),
        RuleInfo("code/unknown-language", Severity.WARNING, "Code block language is in the configured allow-list"),
    )

    def run(self, context: CheckContext) -> Iterator[Finding]:
        allowed = context.config.code_languages
        allowed_lower = {language.lower() for language in allowed} if allowed is not None else None
        for document in context.model.documents:
            for block in document.code_blocks:
                if block.indented:
                    continue
                language = block.language
                if language is None:
                    yield self.finding(
                        "code/missing-language",
                        document.source_path,
                        "Fenced code block has no language identifier",
                        block.line,
                    )
                elif allowed_lower is not None and language.lower() not in allowed_lower:
                    yield self.finding(
                        "code/unknown-language",
                        document.source_path,
                        f"Code block language {language!r} is not in the allowed list",
                        block.line,
                    )
