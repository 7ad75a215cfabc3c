# -*- coding: utf-8 -*-
"""Discord webhook notifier: one multipart message with the strip attached."""

import json
from dataclasses import dataclass
from typing import Dict

from comic.context import REQUEST_TIMEOUT, RunContext, succeeded
from comic.errors import NotificationTransportError
from comic.schedule import attachment_filename
from comic.selection import SelectedStrip

DISCORD_API_BASE = "https://discord.com/api/v10"
ERROR_TRIM = 300


@dataclass(frozen=True)
class NotificationPayload:
    caption: str
    image: bytes
    filename: str
    content_type: str = "image/png"


def webhook_url(webhook_id: str, webhook_token: str) -> str:
    return f"{DISCORD_API_BASE}/webhooks/{webhook_id}/{webhook_token}"


def build_payload(strip: SelectedStrip, page_url: str, path: str) -> NotificationPayload:
    # <url> keeps Discord from unfurling the link next to the attachment.
    return NotificationPayload(
        caption=f"[{strip.metadata.name}](<{page_url}>)",
        image=strip.image,
        filename=attachment_filename(path),
        content_type=strip.content_type,
    )


def payload_json(payload: NotificationPayload) -> Dict:
    return {
        "content": payload.caption,
        "attachments": [{"id": 0}],
        "allowed_mentions": {"parse": []},
    }


def post_strip(payload: NotificationPayload, url: str, ctx: RunContext, strict: bool = True) -> bool:
    """
    POST the strip to the webhook.

    Returns True when Discord accepted it. A rejected post is always logged
    with the response body; with strict=True it also raises
    NotificationTransportError, otherwise the caller gets False.
    """
    log = ctx.logger
    log.debug("Posting to Discord with: %s", {"caption": payload.caption, "filename": payload.filename})

    if ctx.settings.dry_run:
        log.info("[DRY RUN] Would post %s (%d bytes): %s", payload.filename, len(payload.image), payload.caption)
        return True

    r = ctx.session.post(
        url,
        data={"payload_json": json.dumps(payload_json(payload))},
        files={"files[0]": (payload.filename, payload.image, payload.content_type)},
        timeout=REQUEST_TIMEOUT,
    )
    log.debug("Discord response status: %d", r.status_code)
    if succeeded(r):
        log.info("Posted %s to webhook.", payload.filename)
        return True

    body = r.text[:ERROR_TRIM]
    log.error("Discord error response (%d): %s", r.status_code, body)
    if strict:
        raise NotificationTransportError(r.status_code, body)
    return False
