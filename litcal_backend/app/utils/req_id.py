# litcal_backend/app/utils/req_id.py
from __future__ import annotations
import os, re, time, uuid

from fastapi import Request

# Incoming ids are echoed back only when they look like ids.
_INCOMING_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

def new_request_id(prefix: str = "req") -> str:
    return f"{prefix}-{int(time.time()*1000)}-{os.getpid()}-{uuid.uuid4().hex[:6]}"

def request_id_for(request: Request, prefix: str = "req") -> str:
    """Caller's X-Request-Id when well-formed, else a fresh one."""
    incoming = request.headers.get("X-Request-Id", "").strip()
    if _INCOMING_ID.match(incoming):
        return incoming
    return new_request_id(prefix)
