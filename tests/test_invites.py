"""Tests for cofounder invitations, withdrawal and acceptance."""

import pytest

from venture_registry.core.errors import (
    AuthorizedUserStartupMismatch,
    FounderMissing,
    UserAlreadyMemberOfStartup,
    UserHasPendingStartupInvite,
    UserIsNotPendingFounder,
    UserPendingStartupMismatch,
)
from venture_registry.db.enums import JobType, NotificationType
from venture_registry.db.models import Partnership, User
from venture_registry.services import invite_service, job_service, user_service


def _email_jobs(db, startup):
    return job_service.list_jobs(db, startup_id=startup.id, job_type=JobType.SEND_EMAIL)


def test_invite_new_email_creates_pending_placeholder(db, founder, startup):
    result = invite_service.invite(db, founder, startup, "a@x.com", fullname="Ana")

    assert result.outcome == "created"
    assert result.created
    user = result.user
    assert user.email == "a@x.com"
    assert user.pending_startup_id == startup.id
    assert user.startup_id is None
    assert user.invitation_token

    jobs = _email_jobs(db, startup)
    assert len(jobs) == 1
    assert jobs[0].payload["to"] == "a@x.com"
    assert user.invitation_token in jobs[0].payload["html"]
    assert "invited to join Ada Founder's startup as a co-founder" in jobs[0].payload["html"]


def test_invite_normalizes_email(db, founder, startup):
    result = invite_service.invite(db, founder, startup, "  New.Person@X.com ")
    assert result.user.email == "new.person@x.com"


def test_invite_existing_user_attaches_pending(db, founder, outsider, startup):
    result = invite_service.invite(db, founder, startup, outsider.email)

    assert result.outcome == "attached"
    assert not result.created
    assert result.user.id == outsider.id
    assert outsider.pending_startup_id == startup.id
    assert outsider.invitation_token is None

    jobs = _email_jobs(db, startup)
    assert len(jobs) == 1
    assert "invitation_token" not in jobs[0].payload["html"]

    notices = job_service.list_jobs(db, job_type=JobType.NOTIFICATION)
    assert len(notices) == 1
    assert notices[0].payload["user_id"] == str(outsider.id)
    assert notices[0].payload["type"] == NotificationType.COFOUNDER_INVITED.value


def test_invite_member_of_any_startup_fails_without_change(
    db, founder, user_factory, startup, other_startup
):
    member = user_factory("m@x.com", startup_id=other_startup.id)

    with pytest.raises(UserAlreadyMemberOfStartup):
        invite_service.invite(db, founder, startup, "m@x.com")

    db.refresh(member)
    assert member.startup_id == other_startup.id
    assert member.pending_startup_id is None
    assert _email_jobs(db, startup) == []


def test_duplicate_invite_fails_second_time(db, founder, startup):
    invite_service.invite(db, founder, startup, "a@x.com")

    with pytest.raises(UserHasPendingStartupInvite):
        invite_service.invite(db, founder, startup, "a@x.com")

    assert len(_email_jobs(db, startup)) == 1


def test_invite_pending_for_other_startup_fails(db, founder, user_factory, startup, other_startup):
    user_factory("p@x.com", pending_startup_id=other_startup.id)

    with pytest.raises(UserHasPendingStartupInvite):
        invite_service.invite(db, founder, startup, "p@x.com")


def test_invite_requires_membership(db, outsider, founder, startup, other_startup):
    with pytest.raises(AuthorizedUserStartupMismatch):
        invite_service.invite(db, outsider, startup, "a@x.com")
    with pytest.raises(AuthorizedUserStartupMismatch):
        invite_service.invite(db, founder, other_startup, "a@x.com")

    assert user_service.get_user_by_email(db, "a@x.com") is None


# =============================================================================
# Removal
# =============================================================================


def test_remove_deletes_pending_placeholder(db, founder, startup):
    invite_service.invite(db, founder, startup, "a@x.com")

    result = invite_service.remove(db, founder, startup, "a@x.com")

    assert result.outcome == "deleted"
    assert result.email == "a@x.com"
    assert user_service.get_user_by_email(db, "a@x.com") is None


def test_remove_detaches_user_referenced_by_partnership(
    db, founder, user_factory, startup, other_startup
):
    user = user_factory("p@x.com", pending_startup_id=startup.id)
    db.add(Partnership(user_id=user.id, startup_id=other_startup.id, position=0))
    db.flush()

    result = invite_service.remove(db, founder, startup, "p@x.com")

    assert result.outcome == "detached"
    kept = db.get(User, user.id)
    assert kept is not None
    assert kept.pending_startup_id is None


def test_remove_unknown_email(db, founder, startup):
    with pytest.raises(FounderMissing):
        invite_service.remove(db, founder, startup, "ghost@x.com")


def test_remove_user_without_pending_invite(db, founder, outsider, startup):
    with pytest.raises(UserIsNotPendingFounder):
        invite_service.remove(db, founder, startup, outsider.email)


def test_remove_pending_for_other_startup_leaves_user_untouched(
    db, founder, user_factory, startup, other_startup
):
    user = user_factory("p@x.com", pending_startup_id=other_startup.id)

    with pytest.raises(UserPendingStartupMismatch):
        invite_service.remove(db, founder, startup, "p@x.com")

    db.refresh(user)
    assert user.pending_startup_id == other_startup.id


def test_remove_requires_membership(db, outsider, user_factory, startup):
    user_factory("p@x.com", pending_startup_id=startup.id)

    with pytest.raises(AuthorizedUserStartupMismatch):
        invite_service.remove(db, outsider, startup, "p@x.com")


# =============================================================================
# Acceptance
# =============================================================================


def test_accept_invitation_promotes_and_notifies_members(db, founder, startup):
    invited = invite_service.invite(db, founder, startup, "a@x.com").user
    before = len(_email_jobs(db, startup))

    invite_service.accept_invitation(db, invited)

    assert invited.startup_id == startup.id
    assert invited.pending_startup_id is None
    assert invited.invitation_token is None

    emails = _email_jobs(db, startup)
    assert len(emails) == before + 1
    assert emails[-1].payload["to"] == founder.email
    notices = job_service.list_jobs(db, job_type=JobType.NOTIFICATION)
    assert [n.payload["type"] for n in notices] == [NotificationType.COFOUNDER_JOINED.value]


def test_accept_without_pending_invitation(db, outsider, founder):
    with pytest.raises(UserIsNotPendingFounder):
        invite_service.accept_invitation(db, outsider)
    with pytest.raises(UserAlreadyMemberOfStartup):
        invite_service.accept_invitation(db, founder)
