#!/usr/bin/env python3
"""
Daily Comic Poster

Posts today's GoComics strip for one comic to a Discord webhook, with a
caption linking back to the comic page.

Behavior:
- Registered under two daily crons ("0 15 * * *" and "0 14 * * *"); only the
  one matching US Eastern's current DST state does anything, the other exits
  quietly. Any other cron (or a manual run) always proceeds.
- Scrapes the JSON-LD blocks of the comic viewer through web.scraper.workers.dev
  (or directly with SCRAPE_BACKEND=direct), picks the representative strip and
  uploads its image.

Required environment variables:
- GOCOMICS_SLUG: Comic slug, e.g. "calvinandhobbes"
- WEBHOOK_ID / WEBHOOK_TOKEN: Discord webhook to post to

Optional:
- DEBUG: "true" to log intermediate state
- REQUIRE_DATE_MATCH: "true" to skip strips whose datePublished is not today
- STRICT_NOTIFY: "false" to only log (not fail) when the webhook rejects the post
- SCRAPE_BACKEND: "proxy" (default) or "direct"
- DRY_RUN: "true" to do everything except the webhook POST
- SCHEDULE_CRON: cron expression of the trigger that started this run
- SCHEDULED_TIME: ISO timestamp of the trigger (defaults to now, UTC)
- DAILY_COMIC_YAML: YAML mapping of defaults for the settings above
"""

import logging
import os
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

import yaml

from comic.context import RunContext, Settings
from comic.notify import build_payload, post_strip, webhook_url
from comic.schedule import date_path, parse_published, should_proceed
from comic.scrape import BACKENDS, build_query
from comic.selection import select_strip

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("daily_comic")

SETTING_NAMES = (
    "GOCOMICS_SLUG",
    "WEBHOOK_ID",
    "WEBHOOK_TOKEN",
    "DEBUG",
    "REQUIRE_DATE_MATCH",
    "STRICT_NOTIFY",
    "SCRAPE_BACKEND",
    "DRY_RUN",
)


def _parse_yaml_mapping(raw: str, name: str) -> Dict[str, str]:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid {name}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{name} must be a YAML mapping.")
    out = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        out[str(key).upper()] = str(value).strip()
    return out


def _flag(value: str) -> bool:
    return value.strip().lower() == "true"


def load_settings_from_env() -> Settings:
    raw_defaults = (os.environ.get("DAILY_COMIC_YAML") or "").strip()
    defaults = _parse_yaml_mapping(raw_defaults, "DAILY_COMIC_YAML") if raw_defaults else {}

    values = {}
    for name in SETTING_NAMES:
        env_value = (os.environ.get(name) or "").strip()
        values[name] = env_value or defaults.get(name, "")

    for name in ("GOCOMICS_SLUG", "WEBHOOK_ID", "WEBHOOK_TOKEN"):
        if not values[name]:
            raise ValueError(f"Missing {name} env var.")

    backend = (values["SCRAPE_BACKEND"] or "proxy").lower()
    if backend not in BACKENDS:
        raise ValueError(f"SCRAPE_BACKEND must be one of {sorted(BACKENDS)}, got {backend!r}.")

    return Settings(
        comic_slug=values["GOCOMICS_SLUG"],
        webhook_id=values["WEBHOOK_ID"],
        webhook_token=values["WEBHOOK_TOKEN"],
        debug=_flag(values["DEBUG"]),
        require_date_match=_flag(values["REQUIRE_DATE_MATCH"]),
        strict_notify=_flag(values["STRICT_NOTIFY"] or "true"),
        scrape_backend=backend,
        dry_run=_flag(values["DRY_RUN"]),
    )


def resolve_trigger() -> Tuple[str, datetime]:
    cron = (os.environ.get("SCHEDULE_CRON") or "").strip()
    raw_time = (os.environ.get("SCHEDULED_TIME") or "").strip()
    if not raw_time:
        return cron, datetime.now(timezone.utc)
    instant = parse_published(raw_time)
    if instant is None:
        raise ValueError(f"Invalid SCHEDULED_TIME: {raw_time!r}")
    return cron, instant


def run(cron: Optional[str], instant: datetime, ctx: RunContext) -> bool:
    """Run the pipeline once. Returns False when this trigger is gated off."""
    settings = ctx.settings
    log = ctx.logger

    if not should_proceed(cron, instant):
        log.debug("Skipping due to DST mismatch (cron %s)", cron)
        return False

    log.debug("Checking for today's %s comic...", settings.comic_slug)
    path = date_path(instant)
    query = build_query(settings.comic_slug, path)

    candidates = BACKENDS[settings.scrape_backend](query, path, ctx)
    strip = select_strip(candidates, path, ctx, require_date_match=settings.require_date_match)
    log.info("Selected %r (%s, %d bytes)", strip.metadata.name, strip.content_type, len(strip.image))

    payload = build_payload(strip, query.target_url, path)
    url = webhook_url(settings.webhook_id, settings.webhook_token)
    post_strip(payload, url, ctx, strict=settings.strict_notify)
    return True


def main() -> int:
    try:
        settings = load_settings_from_env()
        cron, instant = resolve_trigger()
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    ctx = RunContext.create(settings, logger=logger)
    logger.info(
        "Starting daily comic. slug=%s cron=%s time=%s DRY_RUN=%s",
        settings.comic_slug,
        cron or "manual",
        instant.isoformat(),
        settings.dry_run,
    )
    ran = run(cron, instant, ctx)
    if not ran:
        logger.info("Trigger %s is not today's slot; nothing to do.", cron)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
