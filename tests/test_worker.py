"""Tests for job handlers and the worker loop."""

import pytest

from venture_registry.db.enums import JobStatus, JobType, NotificationType
from venture_registry.db.models import Notification
from venture_registry.services import email_service, job_service, notification_service


def test_job_registry_resolves_known_handlers():
    from venture_registry.jobs.registry import resolve_job_handler

    assert callable(resolve_job_handler(JobType.SEND_EMAIL.value))
    assert callable(resolve_job_handler(JobType.NOTIFICATION.value))


def test_job_registry_unknown_raises():
    from venture_registry.jobs.registry import resolve_job_handler

    with pytest.raises(ValueError):
        resolve_job_handler("nope")


def test_schedule_job_is_pending(db, startup):
    job = job_service.schedule_job(db, JobType.SEND_EMAIL, {"to": "a@x.com"}, startup_id=startup.id)

    assert job.status == JobStatus.PENDING.value
    assert job.attempts == 0
    assert [j.id for j in job_service.get_pending_jobs(db)] == [job.id]


def test_rolled_back_change_queues_nothing(db, founder, startup):
    db.commit()
    email_service.queue_email(db, "a@x.com", "Hi", "<p>Hi</p>", startup)
    db.rollback()

    assert job_service.list_jobs(db) == []


async def test_send_email_dry_run_completes(db, founder, startup):
    from venture_registry import worker

    email_service.queue_email(db, "a@x.com", "Hi", "<p>Hi</p>", startup)
    db.commit()

    processed = await worker.run_once(db)

    assert processed == 1
    job = job_service.list_jobs(db)[0]
    assert job.status == JobStatus.COMPLETED.value
    assert job.completed_at is not None


async def test_send_email_uses_resend_when_configured(db, startup, monkeypatch):
    from venture_registry import worker
    from venture_registry.core.config import settings
    from venture_registry.services import resend_email_service

    calls = {}

    async def fake_send(**kwargs):
        calls.update(kwargs)
        return True, None, "msg-1"

    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(resend_email_service, "send_email_direct", fake_send)

    job = email_service.queue_email(db, "a@x.com", "Hi", "<p>Hi</p>", startup)
    db.commit()

    await worker.run_once(db)

    assert calls["to_email"] == "a@x.com"
    assert calls["idempotency_key"] == f"job:{job.id}"
    db.refresh(job)
    assert job.status == JobStatus.COMPLETED.value


async def test_failed_job_retries_then_fails(db, startup, monkeypatch):
    from venture_registry import worker
    from venture_registry.core.config import settings
    from venture_registry.services import resend_email_service

    async def failing_send(**kwargs):
        return False, "Resend error 500: boom", None

    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(resend_email_service, "send_email_direct", failing_send)

    job = email_service.queue_email(db, "a@x.com", "Hi", "<p>Hi</p>", startup)
    job.max_attempts = 2
    db.commit()

    await worker.run_once(db)
    db.refresh(job)
    assert job.status == JobStatus.PENDING.value
    assert job.attempts == 1
    assert "boom" in job.last_error

    await worker.run_once(db)
    db.refresh(job)
    assert job.status == JobStatus.FAILED.value
    assert job.attempts == 2


async def test_notification_job_creates_notification(db, founder, outsider, startup):
    from venture_registry import worker

    notification_service.notify_cofounder_invited(db, outsider, startup, founder)
    db.commit()

    await worker.run_once(db)

    notices = notification_service.list_notifications(db, outsider.id)
    assert len(notices) == 1
    assert notices[0].notification_type == NotificationType.COFOUNDER_INVITED.value
    assert notices[0].startup_id == startup.id
    assert "Ada Founder" in notices[0].title


async def test_notification_for_deleted_user_is_skipped(db, founder, user_factory, startup):
    from venture_registry import worker

    gone = user_factory("gone@x.com")
    notification_service.notify_cofounder_invited(db, gone, startup, founder)
    db.delete(gone)
    db.commit()

    await worker.run_once(db)

    assert db.query(Notification).count() == 0
    assert job_service.list_jobs(db)[0].status == JobStatus.COMPLETED.value
