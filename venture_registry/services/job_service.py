"""Job service - background job scheduling and processing state."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from venture_registry.core.config import settings
from venture_registry.db.enums import JobStatus, JobType
from venture_registry.db.models import Job


def schedule_job(
    db: Session,
    job_type: JobType,
    payload: dict,
    startup_id: UUID | None = None,
    run_at: datetime | None = None,
) -> Job:
    """
    Schedule a new background job.

    The job is only flushed: it commits together with the caller's
    transaction, so a rolled-back membership change never sends anything.
    If run_at is None, the job runs immediately.
    """
    job = Job(
        startup_id=startup_id,
        job_type=job_type.value,
        payload=payload,
        run_at=run_at or datetime.now(timezone.utc),
        status=JobStatus.PENDING.value,
        max_attempts=settings.JOB_MAX_ATTEMPTS,
    )
    db.add(job)
    db.flush()
    return job


def get_pending_jobs(db: Session, limit: int = 10) -> list[Job]:
    """
    Get pending jobs that are due to run.

    Returns jobs where status='pending' and run_at <= now, ordered by run_at.
    """
    now = datetime.now(timezone.utc)
    return list(
        db.execute(
            select(Job)
            .where(Job.status == JobStatus.PENDING.value, Job.run_at <= now)
            .order_by(Job.run_at)
            .limit(limit)
        ).scalars().all()
    )


def list_jobs(
    db: Session,
    startup_id: UUID | None = None,
    job_type: JobType | None = None,
    status: JobStatus | None = None,
) -> list[Job]:
    """List jobs with optional filters, oldest first."""
    query = select(Job)
    if startup_id:
        query = query.where(Job.startup_id == startup_id)
    if job_type:
        query = query.where(Job.job_type == job_type.value)
    if status:
        query = query.where(Job.status == status.value)
    return list(db.execute(query.order_by(Job.run_at)).scalars().all())


def mark_job_running(db: Session, job: Job) -> Job:
    """Mark a job as running (increment attempts)."""
    job.status = JobStatus.RUNNING.value
    job.attempts += 1
    db.commit()
    db.refresh(job)
    return job


def mark_job_completed(db: Session, job: Job) -> Job:
    """Mark a job as completed."""
    job.status = JobStatus.COMPLETED.value
    job.completed_at = datetime.now(timezone.utc)
    job.last_error = None
    db.commit()
    db.refresh(job)
    return job


def mark_job_failed(db: Session, job: Job, error: str) -> Job:
    """
    Mark a job as failed.

    If attempts < max_attempts, reset to pending for retry.
    """
    job.last_error = error
    if job.attempts < job.max_attempts:
        job.status = JobStatus.PENDING.value
    else:
        job.status = JobStatus.FAILED.value
    db.commit()
    db.refresh(job)
    return job
