"""Job handler registry."""

from __future__ import annotations

from typing import Awaitable, Callable, Mapping

from venture_registry.db.enums import JobType
from venture_registry.jobs.handlers import email, notifications

JobHandler = Callable[[object, object], Awaitable[None]]

JOB_HANDLERS: Mapping[str, JobHandler] = {
    JobType.SEND_EMAIL.value: email.process_send_email,
    JobType.NOTIFICATION.value: notifications.process_notification,
}


def resolve_job_handler(job_type: str) -> JobHandler:
    handler = JOB_HANDLERS.get(job_type)
    if handler is None:
        raise ValueError(f"Unknown job type: {job_type}")
    return handler
