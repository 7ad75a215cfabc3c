# -*- coding: utf-8 -*-
"""Per-run settings and the context object handed to every stage."""

import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

USER_AGENT = "daily-comic-poster/1.0 (+discord-webhook)"
REQUEST_TIMEOUT = 30  # seconds, applied to every outbound call


def succeeded(response: requests.Response) -> bool:
    """Only 2xx counts; requests treats any status below 400 as ok."""
    return 200 <= response.status_code < 300


def new_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


@dataclass(frozen=True)
class Settings:
    comic_slug: str
    webhook_id: str
    webhook_token: str
    debug: bool = False
    require_date_match: bool = False
    strict_notify: bool = True
    scrape_backend: str = "proxy"
    dry_run: bool = False


@dataclass
class RunContext:
    """
    Everything a stage needs besides its direct input.

    `logger` is the only diagnostics channel. Its level is DEBUG when
    settings.debug is set, so stages can log intermediate state freely.
    """

    settings: Settings
    logger: logging.Logger
    session: requests.Session = field(default_factory=new_session)

    @classmethod
    def create(
        cls,
        settings: Settings,
        logger: Optional[logging.Logger] = None,
        session: Optional[requests.Session] = None,
    ) -> "RunContext":
        logger = logger or logging.getLogger("daily_comic")
        logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
        return cls(settings=settings, logger=logger, session=session or new_session())
