# -*- coding: utf-8 -*-
"""
Candidate selector.

Each raw block from the scrape is a JSON-LD object. We validate it into
ComicMetadata, drop anything that is not the page's representative strip,
and download the first image that really is an image.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from comic.context import REQUEST_TIMEOUT, RunContext, succeeded
from comic.errors import NoUsableCandidateError
from comic.schedule import published_date_path

LOG_TRIM = 200


class ComicMetadata(BaseModel):
    """The JSON-LD ImageObject GoComics embeds for a strip."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    content_url: str = Field(alias="contentUrl")
    representative_of_page: bool = Field(alias="representativeOfPage")

    # Display-only; schema.org allows strings, objects or arrays for these.
    type_tag: Any = Field(None, alias="@type")
    description: Optional[str] = None
    page_url: Any = Field(None, alias="url")
    date_published: Any = Field(None, alias="datePublished")
    publisher: Any = None
    author: Any = None
    creator: Any = None

    @field_validator("description", mode="before")
    @classmethod
    def _description_as_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)


class CandidateParseError(Exception):
    """A script block that is not a usable JSON-LD object."""


@dataclass(frozen=True)
class ParsedCandidate:
    metadata: Optional[ComicMetadata] = None
    error: Optional[CandidateParseError] = None

    @property
    def ok(self) -> bool:
        return self.metadata is not None


def parse_candidate(raw: str) -> ParsedCandidate:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        return ParsedCandidate(error=CandidateParseError(f"not JSON: {exc}"))
    if not isinstance(data, dict):
        return ParsedCandidate(error=CandidateParseError("JSON-LD block is not an object"))
    try:
        return ParsedCandidate(metadata=ComicMetadata.model_validate(data))
    except ValidationError as exc:
        missing = ", ".join(".".join(str(p) for p in e["loc"]) for e in exc.errors())
        return ParsedCandidate(error=CandidateParseError(f"invalid fields: {missing}"))


@dataclass
class SelectedStrip:
    metadata: ComicMetadata
    image: bytes
    content_type: str


def rejection_reason(meta: ComicMetadata, path: str, require_date_match: bool) -> Optional[str]:
    """Why a parsed candidate cannot be used before fetching its image, if at all."""
    if not meta.representative_of_page:
        return "not representative of page"
    if not meta.content_url.strip():
        return "empty contentUrl"
    if require_date_match:
        raw_date = meta.date_published if isinstance(meta.date_published, str) else ""
        published = published_date_path(raw_date)
        if published != path:
            return f"datePublished {meta.date_published!r} does not match {path}"
    return None


def fetch_image(url: str, ctx: RunContext) -> Optional[Tuple[bytes, str]]:
    """GET url and return (body, content type), or None unless it is an image."""
    try:
        r = ctx.session.get(url, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as exc:
        ctx.logger.debug("Image request failed for %s: %s", url, exc)
        return None

    content_type = r.headers.get("Content-Type") or "unknown"
    ctx.logger.debug("Content-Type: %s", content_type)
    if not succeeded(r) or not content_type.startswith("image/"):
        ctx.logger.debug("Invalid image or content type (%d), skipping", r.status_code)
        return None
    return r.content, content_type


def select_strip(
    candidates: Sequence[str],
    path: str,
    ctx: RunContext,
    require_date_match: bool = False,
) -> SelectedStrip:
    log = ctx.logger
    for raw in candidates:
        parsed = parse_candidate(raw)
        if not parsed.ok:
            log.debug("Skipping script block (%s): %s", parsed.error, raw[:LOG_TRIM])
            continue

        meta = parsed.metadata
        log.debug("[Parsed] %s", meta.model_dump(by_alias=True, exclude_none=True))

        reason = rejection_reason(meta, path, require_date_match)
        if reason:
            log.debug("Skipping %r: %s", meta.name, reason)
            continue

        log.debug("Found good payload with content URL: %s", meta.content_url)
        fetched = fetch_image(meta.content_url, ctx)
        if fetched is None:
            continue

        image, content_type = fetched
        return SelectedStrip(metadata=meta, image=image, content_type=content_type)

    raise NoUsableCandidateError(ctx.settings.comic_slug, path, len(candidates))
