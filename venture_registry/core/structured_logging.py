"""Structured logging helpers (PII-safe)."""

import hashlib
from typing import Any


def mask_email(email: str | None) -> str:
    """Return a short, stable hash of an email for log lines."""
    if not email:
        return ""
    digest = hashlib.sha256(email.strip().lower().encode("utf-8")).hexdigest()
    return f"email:{digest[:12]}"


def build_log_context(
    *,
    user_id: str | None = None,
    startup_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if startup_id:
        context["startup_id"] = startup_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
