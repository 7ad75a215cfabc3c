# -*- coding: utf-8 -*-
"""
Scrape requestor.

Asks the web.scraper.workers.dev proxy to fetch the GoComics viewer page and
return the text of the embedded JSON-LD <script> blocks. The `direct` backend
does the same extraction locally with BeautifulSoup.
"""

import json
from dataclasses import dataclass
from typing import Dict, List

from bs4 import BeautifulSoup

from comic.context import REQUEST_TIMEOUT, RunContext, succeeded
from comic.errors import NoDataError, ScrapeParseError, ScrapeTransportError

SCRAPER_URL = "https://web.scraper.workers.dev"
GOCOMICS_BASE = "https://www.gocomics.com"
COMIC_SELECTOR = (
    'div[data-sentry-component="ComicViewer"] '
    'script[type="application/ld+json"][data-sentry-component="Schema"]'
)
SCRAPE_MODE = "text"

LOG_TRIM = 500


@dataclass(frozen=True)
class ScrapeQuery:
    target_url: str
    css_selector: str = COMIC_SELECTOR
    scrape_mode: str = SCRAPE_MODE

    def params(self) -> Dict[str, str]:
        return {
            "url": self.target_url,
            "selector": self.css_selector,
            "scrape": self.scrape_mode,
        }


def comic_page_url(slug: str, path: str) -> str:
    return f"{GOCOMICS_BASE}/{slug}/{path}"


def build_query(slug: str, path: str) -> ScrapeQuery:
    return ScrapeQuery(target_url=comic_page_url(slug, path))


def _only_strings(entries) -> List[str]:
    return [e for e in entries if isinstance(e, str)]


def fetch_candidates(query: ScrapeQuery, path: str, ctx: RunContext) -> List[str]:
    """Return the raw JSON-LD texts the proxy extracted for our selector."""
    log = ctx.logger
    log.debug("Scraping URL: %s", query.target_url)
    log.debug("Using selector: %s", query.css_selector)

    r = ctx.session.get(SCRAPER_URL, params=query.params(), timeout=REQUEST_TIMEOUT)
    if not succeeded(r):
        raise ScrapeTransportError(r.status_code)

    raw = r.text
    log.debug("Raw scraper response: %s", raw[:LOG_TRIM])
    try:
        data = json.loads(raw)
    except ValueError as exc:
        log.error("Failed to parse JSON from scraper: %s", exc)
        raise ScrapeParseError("Invalid JSON from scraper") from exc

    result = data.get("result") if isinstance(data, dict) else None
    if not isinstance(result, dict):
        log.error("Scraper response has no result mapping.")
        raise NoDataError(ctx.settings.comic_slug, path)

    entries = result.get(query.css_selector)
    entries = _only_strings(entries) if isinstance(entries, list) else []
    if not entries:
        log.error("No matching selector data found. Available keys: %s", list(result.keys()))
        raise NoDataError(ctx.settings.comic_slug, path)

    log.debug("Number of matching data entries: %d", len(entries))
    return entries


def extract_ld_json(html: str, selector: str = COMIC_SELECTOR) -> List[str]:
    soup = BeautifulSoup(html, "html.parser")
    blocks = []
    for tag in soup.select(selector):
        text = tag.string
        if text and text.strip():
            blocks.append(str(text))
    return blocks


def fetch_candidates_direct(query: ScrapeQuery, path: str, ctx: RunContext) -> List[str]:
    """Fetch the comic page ourselves and extract the JSON-LD blocks locally."""
    ctx.logger.debug("Fetching page directly: %s", query.target_url)
    r = ctx.session.get(query.target_url, timeout=REQUEST_TIMEOUT)
    if not succeeded(r):
        raise ScrapeTransportError(r.status_code)

    entries = extract_ld_json(r.text, query.css_selector)
    if not entries:
        ctx.logger.error("Selector matched nothing on %s", query.target_url)
        raise NoDataError(ctx.settings.comic_slug, path)
    ctx.logger.debug("Number of matching data entries: %d", len(entries))
    return entries


BACKENDS = {
    "proxy": fetch_candidates,
    "direct": fetch_candidates_direct,
}
