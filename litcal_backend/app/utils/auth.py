# litcal_backend/app/utils/auth.py
from __future__ import annotations

import hmac

from fastapi import Request

from litcal_backend.app.config.manifest import auth_bypass, write_token
from litcal_backend.app.errors import UnauthorizedError

# What it does:
# Write-access gate for PUT/PATCH/DELETE. A bearer token compared with the
# configured LITCAL_WRITE_TOKEN; LITCAL_DEV_AUTH_BYPASS=1 turns it off.

def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        token = auth[7:].strip()
        return token or None
    return None

def require_writer(request: Request) -> None:
    if auth_bypass():
        return
    expected = write_token()
    if expected is None:
        raise UnauthorizedError("Write access is not configured")
    supplied = _extract_bearer_token(request)
    if supplied is None:
        raise UnauthorizedError("Missing bearer token")
    if not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise UnauthorizedError("Invalid bearer token")

def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for", "")
    for part in forwarded.split(","):
        if part.strip():
            return part.strip()
    return request.client.host if request.client else "unknown"
