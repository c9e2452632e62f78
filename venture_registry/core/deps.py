"""FastAPI dependencies for authentication and database access."""

from typing import Generator
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from venture_registry.core.errors import AuthTokenInvalid
from venture_registry.core.security import decode_session_token
from venture_registry.db.session import SessionLocal


# Cookie and header names
COOKIE_NAME = "registry_session"
AUTH_HEADER = "Authorization"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    Anything not committed by the endpoint is rolled back on close.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _extract_token(request: Request) -> str | None:
    header = request.headers.get(AUTH_HEADER, "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(COOKIE_NAME)


def get_current_user(request: Request, db: Session = Depends(get_db)):
    """
    Get authenticated user from bearer token or session cookie.

    Validates:
    - Token exists
    - JWT is valid and not expired
    - User exists
    - Token version matches (for revocation support)

    Raises:
        AuthTokenInvalid: Authentication failed
    """
    # Import here to avoid circular imports
    from venture_registry.db.models import User

    token = _extract_token(request)
    if not token:
        raise AuthTokenInvalid()

    try:
        payload = decode_session_token(token)
        user_id = UUID(str(payload["sub"]))
    except Exception:
        raise AuthTokenInvalid("Invalid session")

    user = db.get(User, user_id)
    if not user:
        raise AuthTokenInvalid("User not found")

    if user.token_version != payload.get("token_version"):
        raise AuthTokenInvalid("Session revoked")

    return user
