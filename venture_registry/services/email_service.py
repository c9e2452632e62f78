"""Email service - compose founder emails and queue them for the worker."""

import html
import logging
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from venture_registry.core.config import settings
from venture_registry.core.structured_logging import mask_email
from venture_registry.db.enums import JobType
from venture_registry.db.models import Job, Startup, User
from venture_registry.services import job_service


logger = logging.getLogger(__name__)


def _display_name(user: User | None) -> str:
    if user is None:
        return "A founder"
    return user.fullname or user.email


def _startup_name(startup: Startup) -> str:
    return startup.name or "their startup"


def activation_url(invitation_token: str) -> str:
    """Link a placeholder user follows to activate their account."""
    query = urlencode({"invitation_token": invitation_token})
    return f"{settings.FRONTEND_URL.rstrip('/')}/users/invitation/accept?{query}"


def startup_url(startup: Startup) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/startups/{startup.id}"


def queue_email(
    db: Session,
    to_email: str,
    subject: str,
    body: str,
    startup: Startup | None = None,
) -> Job:
    """Queue an email for delivery by the worker."""
    job = job_service.schedule_job(
        db,
        JobType.SEND_EMAIL,
        payload={"to": to_email, "subject": subject, "html": body},
        startup_id=startup.id if startup else None,
    )
    logger.info("Queued email job %s to %s", job.id, mask_email(to_email))
    return job


def send_cofounder_invitation(
    db: Session,
    invitee: User,
    startup: Startup,
    inviter: User,
    invitation_token: str | None = None,
) -> Job:
    """
    Queue the cofounder invitation email.

    New placeholder users get an activation link carrying their invitation
    token; existing users get a link to the startup.
    """
    inviter_name = html.escape(_display_name(inviter))
    startup_name = html.escape(_startup_name(startup))
    if invitation_token:
        link = activation_url(invitation_token)
        action = "Accept the invitation and set up your account"
    else:
        link = startup_url(startup)
        action = "Sign in to respond to the invitation"

    body = (
        f"<p>Hello {html.escape(invitee.fullname or '')},</p>"
        f"<p>You have been invited to join {inviter_name}'s startup as a co-founder"
        f" ({startup_name}).</p>"
        f'<p><a href="{html.escape(link)}">{action}</a></p>'
        f"<p>{html.escape(link)}</p>"
    )
    return queue_email(
        db,
        to_email=invitee.email,
        subject=f"{_display_name(inviter)} invited you to join {_startup_name(startup)}",
        body=body,
        startup=startup,
    )


def send_cofounder_joined(
    db: Session,
    member: User,
    startup: Startup,
    new_cofounder: User,
) -> Job:
    """Queue the notice telling an existing founder that someone joined."""
    name = html.escape(_display_name(new_cofounder))
    role = f" as {html.escape(new_cofounder.title)}" if new_cofounder.title else ""
    link = startup_url(startup)
    body = (
        f"<p>Hello {html.escape(member.fullname or '')},</p>"
        f"<p>{name} has joined {html.escape(_startup_name(startup))}{role}.</p>"
        f'<p><a href="{html.escape(link)}">View your startup</a></p>'
    )
    return queue_email(
        db,
        to_email=member.email,
        subject=f"{_display_name(new_cofounder)} joined {_startup_name(startup)}",
        body=body,
        startup=startup,
    )
