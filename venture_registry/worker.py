"""
Background worker for processing queued jobs.

Usage:
    python -m venture_registry.worker

The worker polls for pending jobs (invitation emails, cofounder notices,
in-app notifications) and processes them. Failures are retried up to the
job's max_attempts and never affect the membership change that queued them.
"""

import asyncio
import logging

from venture_registry.core.config import settings
from venture_registry.db.session import SessionLocal
from venture_registry.jobs.registry import resolve_job_handler
from venture_registry.services import job_service

logger = logging.getLogger(__name__)


async def process_job(db, job) -> None:
    """Process a single job based on its type."""
    logger.info("Processing job %s (type=%s, attempt=%s)", job.id, job.job_type, job.attempts)
    handler = resolve_job_handler(job.job_type)
    await handler(db, job)


async def run_once(db, batch_size: int | None = None) -> int:
    """Process one batch of due jobs. Returns the number of jobs attempted."""
    jobs = job_service.get_pending_jobs(db, limit=batch_size or settings.WORKER_BATCH_SIZE)
    if jobs:
        logger.info("Found %d pending jobs", len(jobs))

    for job in jobs:
        try:
            job_service.mark_job_running(db, job)
            await process_job(db, job)
            job_service.mark_job_completed(db, job)
            logger.info("Job %s completed successfully", job.id)
        except Exception as e:
            db.rollback()
            job_service.mark_job_failed(db, job, str(e)[:500])
            logger.error("Job %s failed: %s", job.id, type(e).__name__)
    return len(jobs)


async def worker_loop() -> None:
    """Main worker loop - polls for and processes pending jobs."""
    logger.info(
        "Worker starting (poll interval: %ss, batch size: %s)",
        settings.WORKER_POLL_INTERVAL,
        settings.WORKER_BATCH_SIZE,
    )
    if not settings.RESEND_API_KEY:
        logger.warning("RESEND_API_KEY not set - emails will be logged but not sent")

    while True:
        with SessionLocal() as db:
            try:
                await run_once(db)
            except Exception as e:
                logger.error("Error in worker loop: %s", type(e).__name__)
        await asyncio.sleep(settings.WORKER_POLL_INTERVAL)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        asyncio.run(worker_loop())
    except KeyboardInterrupt:
        logger.info("Worker stopped")


if __name__ == "__main__":
    main()
