"""CLI tools for registry administration."""

import click
from sqlalchemy.exc import IntegrityError

from venture_registry.core.security import create_session_token
from venture_registry.db.session import SessionLocal
from venture_registry.services import user_service


@click.group()
def cli():
    """Venture registry CLI tools."""
    pass


@cli.command()
@click.option("--email", required=True, help="User email address")
@click.option("--fullname", default=None, help="Display name")
@click.option("--title", default=None, help="Title within the startup")
def create_user(email: str, fullname: str | None, title: str | None):
    """
    Create a user with no startup.

    Example:
        venture-registry create-user --email "founder@example.com" --fullname "Ada"
    """
    db = SessionLocal()
    try:
        if user_service.get_user_by_email(db, email):
            click.echo(f"❌ User already exists: {email}")
            raise SystemExit(1)

        user = user_service.create_user(db, email=email, fullname=fullname, title=title)
        db.commit()

        click.echo(f"✓ Created user {user.email}")
        click.echo(f"  ID: {user.id}")
    except IntegrityError as e:
        db.rollback()
        click.echo(f"❌ Error: {e.orig}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User to mint a session token for")
def mint_token(email: str):
    """
    Print a bearer token for a user.

    Example:
        venture-registry mint-token --email "founder@example.com"
    """
    db = SessionLocal()
    try:
        user = user_service.get_user_by_email(db, email)
        if not user:
            click.echo(f"❌ User not found: {email}")
            raise SystemExit(1)
        click.echo(create_session_token(user.id, user.token_version))
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email to revoke sessions for")
def revoke_sessions(email: str):
    """
    Revoke all sessions for a user by bumping their token_version.

    Example:
        venture-registry revoke-sessions --email "user@example.com"
    """
    db = SessionLocal()
    try:
        user = user_service.get_user_by_email(db, email)
        if not user:
            click.echo(f"❌ User not found: {email}")
            raise SystemExit(1)

        old_version = user.token_version
        user.token_version += 1
        db.commit()

        click.echo(f"✓ Revoked all sessions for {email}")
        click.echo(f"  Token version: {old_version} → {user.token_version}")
    finally:
        db.close()


@cli.command()
def run_worker():
    """Run the background job worker until interrupted."""
    from venture_registry.worker import main

    main()


if __name__ == "__main__":
    cli()
