"""Opt-in reachability check of external URLs."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterator, List, Tuple, Union

import requests

from docs_corpus.checks.base import Check, CheckContext, RuleInfo
from docs_corpus.config import ExternalLinkSettings, LintConfig
from docs_corpus.model.finding_model import Finding, Severity
from docs_corpus.utils.logger import get_logger

LOGGER = get_logger(__name__)

CHECKED_SCHEMES = ("http://", "https://")

Status = Union[int, str]


def check_url(url: str, settings: ExternalLinkSettings) -> Tuple[str, Status]:
    """Return the final HTTP status of ``url``, or the error text when unreachable."""
    headers = {"User-Agent": settings.user_agent}
    try:
        # HEAD first for speed; some servers reject it, so fall back to GET.
        response = requests.head(url, headers=headers, timeout=settings.timeout, allow_redirects=True)
        if response.status_code >= 400:
            response = requests.get(
                url, headers=headers, timeout=settings.timeout, allow_redirects=True, stream=True
            )
            response.close()
        return url, response.status_code
    except requests.RequestException as exc:
        return url, str(exc)


def is_broken(status: Status) -> bool:
    return not isinstance(status, int) or status >= 400


class ExternalLinkCheck(Check):
    """External links answer with a non-error status."""

    rules = (RuleInfo("links/external-unreachable", Severity.WARNING, "External URLs are reachable"),)

    def enabled(self, config: LintConfig) -> bool:
        return config.external_links.enabled

    def run(self, context: CheckContext) -> Iterator[Finding]:
        usages: Dict[str, List[Tuple[str, int]]] = {}
        for document in context.model.documents:
            for link in document.external_links:
                url = link.target.strip()
                if not url.lower().startswith(CHECKED_SCHEMES):
                    continue
                usages.setdefault(url, []).append((document.source_path, link.line))

        if not usages:
            return
        settings = context.config.external_links
        LOGGER.info("Checking %d unique external URLs", len(usages))
        with ThreadPoolExecutor(max_workers=settings.workers) as executor:
            results = list(executor.map(lambda url: check_url(url, settings), sorted(usages)))

        broken = [(url, status) for url, status in results if is_broken(status)]
        LOGGER.info("%d of %d external URLs look broken", len(broken), len(usages))
        for url, status in broken:
            detail = f"HTTP {status}" if isinstance(status, int) else status
            for path, line in usages[url]:
                yield self.finding("links/external-unreachable", path, f"External link {url} is unreachable ({detail})", line)
