"""Enums shared by models, services and schemas."""

from enum import Enum


class ApprovalStatus(str, Enum):
    """
    Startup approval workflow.

    A new startup has no approval status (NULL). Incubation moves it to
    PENDING; APPROVED/REJECTED are set by reviewers outside this service.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RegistrationType(str, Enum):
    """Legal form a startup registers as. NONE until registration."""

    NONE = "none"
    PARTNERSHIP = "partnership"
    PRIVATE_LIMITED = "private_limited"
    LLP = "llp"


class CofounderStatus(str, Enum):
    """
    A user's relation to one startup, derived from user fields.

    Never stored: computed by membership_service.cofounder_status().
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class JobType(str, Enum):
    """Types of background jobs."""
    SEND_EMAIL = "send_email"
    NOTIFICATION = "notification"


class JobStatus(str, Enum):
    """Status of background jobs."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class NotificationType(str, Enum):
    """In-app notification kinds."""
    COFOUNDER_INVITED = "cofounder_invited"
    COFOUNDER_JOINED = "cofounder_joined"


DEFAULT_JOB_STATUS = JobStatus.PENDING
DEFAULT_REGISTRATION_TYPE = RegistrationType.NONE
