"""Notification job handlers."""

from __future__ import annotations

import logging
from uuid import UUID

from venture_registry.db.enums import NotificationType
from venture_registry.db.models import User
from venture_registry.services import notification_service

logger = logging.getLogger(__name__)


def _coerce_uuid(raw_id: str | None) -> UUID | None:
    if not raw_id:
        return None
    try:
        return UUID(str(raw_id))
    except (TypeError, ValueError):
        logger.warning("Invalid UUID value '%s' in notification payload", raw_id)
        return None


async def process_notification(db, job) -> None:
    """Process notification job - create in-app notification record."""
    payload = job.payload or {}

    user_id = _coerce_uuid(payload.get("user_id"))
    title = payload.get("title")
    if not user_id or not title:
        logger.warning("Skipping notification job %s with incomplete payload", job.id)
        return

    # The recipient may have been removed since the job was queued
    if db.get(User, user_id) is None:
        logger.info("Skipping notification job %s: user no longer exists", job.id)
        return

    raw_type = payload.get("type")
    if raw_type not in NotificationType._value2member_map_:
        logger.warning("Unknown notification type '%s' in job %s", raw_type, job.id)
        return

    notification_service.create_notification(
        db=db,
        user_id=user_id,
        type=raw_type,
        title=title,
        message=payload.get("message"),
        startup_id=_coerce_uuid(payload.get("startup_id")),
    )
    db.commit()
