"""Resend Email Service.

Delivers queued emails through the Resend HTTP API.
"""

from __future__ import annotations

import logging
import re

import httpx

logger = logging.getLogger(__name__)

RESEND_SEND_URL = "https://api.resend.com/emails"
RESEND_TIMEOUT_SECONDS = 20.0


def _html_to_text(content: str) -> str:
    text = re.sub(r"<br\s*/?>|</p>", "\n", content, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


async def send_email_direct(
    api_key: str,
    to_email: str,
    subject: str,
    body: str,
    from_email: str,
    idempotency_key: str | None = None,
) -> tuple[bool, str | None, str | None]:
    """
    Send an email via Resend.

    Returns:
        (success, error_message, message_id)
    """
    payload: dict[str, object] = {
        "from": from_email,
        "to": [to_email],
        "subject": subject,
        "html": body,
    }
    text = _html_to_text(body)
    if text:
        payload["text"] = text

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    if idempotency_key:
        headers["Idempotency-Key"] = idempotency_key

    try:
        async with httpx.AsyncClient(timeout=RESEND_TIMEOUT_SECONDS) as client:
            response = await client.post(RESEND_SEND_URL, headers=headers, json=payload)
    except httpx.TimeoutException:
        return False, "Connection timeout", None
    except httpx.HTTPError as e:
        logger.exception("Resend connection error")
        return False, f"Connection error: {e.__class__.__name__}", None

    if 200 <= response.status_code < 300:
        return True, None, response.json().get("id")

    if response.status_code == 409:
        # Idempotency conflict = already sent
        return True, None, None

    error_detail = None
    try:
        data = response.json()
        if isinstance(data, dict):
            error_detail = data.get("message")
    except ValueError:
        pass
    return False, f"Resend error {response.status_code}: {error_detail or response.text[:200]}", None
