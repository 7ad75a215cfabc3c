# -*- coding: utf-8 -*-
"""
Schedule gate and date helpers.

The workflow is registered under two daily UTC crons. Only one of them should
post on any given day, depending on whether US Eastern is on daylight time.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

REFERENCE_TZ = ZoneInfo("America/New_York")

CRON_STANDARD = "0 15 * * *"  # EST slot
CRON_DAYLIGHT = "0 14 * * *"  # EDT slot

_LONG_DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%Y/%m/%d")


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def standard_utc_offset(local_dt: datetime) -> timedelta:
    """Standard-time offset of local_dt's zone: the smaller of Jan 1 and Jul 1."""
    tz = local_dt.tzinfo
    jan = datetime(local_dt.year, 1, 1, tzinfo=tz).utcoffset()
    jul = datetime(local_dt.year, 7, 1, tzinfo=tz).utcoffset()
    return min(jan, jul)


def is_dst_observed(instant: datetime) -> bool:
    local = _as_utc(instant).astimezone(REFERENCE_TZ)
    return local.utcoffset() > standard_utc_offset(local)


def should_proceed(cron: Optional[str], instant: datetime) -> bool:
    """Return False when this trigger is the wrong slot for today's DST state."""
    if cron == CRON_STANDARD:
        return not is_dst_observed(instant)
    if cron == CRON_DAYLIGHT:
        return is_dst_observed(instant)
    return True


def date_path(instant: datetime) -> str:
    """UTC calendar date as 'YYYY/M/D' (no zero padding)."""
    utc = _as_utc(instant)
    return "/".join(str(part) for part in (utc.year, utc.month, utc.day))


def attachment_filename(path: str) -> str:
    return path.replace("/", "-") + ".png"


def parse_published(value: str) -> Optional[datetime]:
    """Best-effort parse of a JSON-LD datePublished value; naive results are UTC."""
    text = (value or "").strip()
    if not text:
        return None
    iso = re.sub(r"Z$", "+00:00", text)
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        parsed = None
        for fmt in _LONG_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    return _as_utc(parsed)


def published_date_path(value: str) -> Optional[str]:
    parsed = parse_published(value)
    if parsed is None:
        return None
    return date_path(parsed)
