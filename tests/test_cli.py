"""Tests for the admin CLI."""

from click.testing import CliRunner

from venture_registry.cli import cli
from venture_registry.core.security import decode_session_token
from venture_registry.services import user_service


def test_create_user_then_duplicate(db):
    runner = CliRunner()

    result = runner.invoke(cli, ["create-user", "--email", "Ada@X.com", "--fullname", "Ada"])
    assert result.exit_code == 0
    assert "Created user ada@x.com" in result.output
    assert user_service.get_user_by_email(db, "ada@x.com") is not None

    result = runner.invoke(cli, ["create-user", "--email", "ada@x.com"])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_mint_token_round_trips(db, founder):
    db.commit()

    result = CliRunner().invoke(cli, ["mint-token", "--email", founder.email])

    assert result.exit_code == 0
    payload = decode_session_token(result.output.strip())
    assert payload["sub"] == str(founder.id)
    assert payload["token_version"] == founder.token_version


def test_revoke_sessions_bumps_token_version(db, founder):
    db.commit()
    old_version = founder.token_version

    result = CliRunner().invoke(cli, ["revoke-sessions", "--email", founder.email])

    assert result.exit_code == 0
    db.refresh(founder)
    assert founder.token_version == old_version + 1


def test_unknown_user(db):
    result = CliRunner().invoke(cli, ["revoke-sessions", "--email", "ghost@x.com"])
    assert result.exit_code == 1
    assert "User not found" in result.output
