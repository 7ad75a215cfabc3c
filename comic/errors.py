# -*- coding: utf-8 -*-
"""Fatal errors raised by the daily comic pipeline."""

from typing import Optional


class ComicError(Exception):
    """Base class for everything that aborts a run."""


class ScrapeTransportError(ComicError):
    def __init__(self, status_code: int):
        super().__init__(f"Bad response from scraper: {status_code}")
        self.status_code = status_code


class ScrapeParseError(ComicError):
    pass


class NoDataError(ComicError):
    def __init__(self, slug: str, date_path: str):
        super().__init__(f"No suitable data found on {slug} page ({date_path})")
        self.slug = slug
        self.date_path = date_path


class NoUsableCandidateError(ComicError):
    def __init__(self, slug: str, date_path: str, examined: int):
        super().__init__(
            f"No suitable data found on {slug} page ({date_path}) after {examined} script tags"
        )
        self.slug = slug
        self.date_path = date_path
        self.examined = examined


class NotificationTransportError(ComicError):
    def __init__(self, status_code: int, body: Optional[str] = None):
        message = f"Discord webhook error {status_code}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body
