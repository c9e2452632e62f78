"""Email-related job handlers."""

from __future__ import annotations

import logging

from venture_registry.core.config import settings
from venture_registry.core.structured_logging import mask_email
from venture_registry.services import resend_email_service

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Provider rejected or could not accept the email; the job is retried."""

    pass


async def process_send_email(db, job) -> None:
    """
    Deliver a queued email.

    If RESEND_API_KEY is not set, logs the email instead of sending.
    """
    payload = job.payload or {}
    to_email = payload.get("to")
    subject = payload.get("subject")
    body = payload.get("html") or ""
    if not to_email or not subject:
        raise EmailDeliveryError("Missing recipient or subject in job payload")

    if not settings.RESEND_API_KEY:
        logger.info("[DRY RUN] Email send skipped for job=%s to=%s", job.id, mask_email(to_email))
        return

    success, error, message_id = await resend_email_service.send_email_direct(
        api_key=settings.RESEND_API_KEY,
        to_email=to_email,
        subject=subject,
        body=body,
        from_email=settings.EMAIL_FROM,
        idempotency_key=f"job:{job.id}",
    )
    if not success:
        raise EmailDeliveryError(error or "Email delivery failed")

    logger.info(
        "Email sent for job=%s recipient=%s message_id=%s",
        job.id,
        mask_email(to_email),
        message_id,
    )
