from __future__ import annotations
import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status
from fastapi.responses import JSONResponse

from litcal_backend.app.errors import UnsupportedMediaTypeError, ValidationError
from litcal_backend.app.services.locales import LocaleResolver
from litcal_backend.app.services.temporale.assembler import assemble_response
from litcal_backend.app.services.temporale.deleter import delete_event
from litcal_backend.app.services.temporale.reconciler import (
    WriteContext, ensure_creatable, patch_temporale, put_temporale,
)
from litcal_backend.app.utils.auth import client_ip, require_writer
from litcal_backend.app.utils.req_id import request_id_for

router = APIRouter(prefix="/temporale", tags=["temporale"])

LOCALE_HEADER = "X-Litcal-Temporale-Locale"

# What it does:
# Build the per-request locale state: names locale from Accept-Language
# (lenient) unless ?locale= is given (strict).
def _resolve(accept_language: Optional[str], locale: Optional[str]) -> tuple[LocaleResolver, str]:
    resolver = LocaleResolver.from_store()
    return resolver, resolver.resolve_request_locale(accept_language, locale)

def _write_context(request: Request, locale: str) -> WriteContext:
    return WriteContext(
        locale=locale,
        client_ip=client_ip(request),
        request_id=request_id_for(request, "tmp"),
    )

def _require_json(request: Request) -> None:
    ctype = request.headers.get("content-type", "")
    media = ctype.split(";", 1)[0].strip().lower()
    if media != "application/json" and not media.endswith("+json"):
        raise UnsupportedMediaTypeError(
            f"Unsupported Content-Type '{ctype or 'none'}', expected application/json"
        )

async def _raw_body(request: Request) -> bytes:
    return await request.body()

def _json_body(raw: bytes) -> Any:
    if not raw.strip():
        raise ValidationError("Request body is empty")
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError(f"Malformed JSON in request body: {e}") from e

def _reply(body: dict, locale: str, request_id: Optional[str] = None, status_code: int = 200) -> JSONResponse:
    headers = {LOCALE_HEADER: locale}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(content=body, status_code=status_code, headers=headers)

# What it does:
# Temporale events with names and readings in the resolved locale,
# followed by the weekday events derived from the lectionary.
@router.get("")
@router.post("")
def get_temporale(
    locale: Optional[str] = Query(None),
    accept_language: Optional[str] = Header(None),
) -> JSONResponse:
    resolver, resolved = _resolve(accept_language, locale)
    return _reply(assemble_response(resolver, resolved), resolved)

# What it does:
# Initial creation only; 409 once the core list holds events.
@router.put("", dependencies=[Depends(require_writer)])
def put_temporale_route(
    request: Request,
    raw: bytes = Depends(_raw_body),
    locale: Optional[str] = Query(None),
    accept_language: Optional[str] = Header(None),
) -> JSONResponse:
    resolver, resolved = _resolve(accept_language, locale)
    ensure_creatable()
    _require_json(request)
    payload = _json_body(raw)
    ctx = _write_context(request, resolved)
    result = put_temporale(payload, ctx, resolver)
    return _reply(result.model_dump(), resolved, ctx.request_id, status.HTTP_201_CREATED)

# What it does:
# Add or update events; new keys need names and readings.
@router.patch("", dependencies=[Depends(require_writer)])
def patch_temporale_route(
    request: Request,
    raw: bytes = Depends(_raw_body),
    locale: Optional[str] = Query(None),
    accept_language: Optional[str] = Header(None),
) -> JSONResponse:
    resolver, resolved = _resolve(accept_language, locale)
    _require_json(request)
    payload = _json_body(raw)
    ctx = _write_context(request, resolved)
    result = patch_temporale(payload, ctx, resolver)
    return _reply(result.model_dump(), resolved, ctx.request_id)

@router.delete("", dependencies=[Depends(require_writer)])
def delete_without_key() -> JSONResponse:
    raise ValidationError("DELETE requires exactly one path parameter: the event_key")

# What it does:
# Remove an event from every store (weekday keys: lectionary only).
@router.delete("/{event_key}", dependencies=[Depends(require_writer)])
def delete_temporale_route(
    event_key: str,
    request: Request,
    locale: Optional[str] = Query(None),
    accept_language: Optional[str] = Header(None),
) -> JSONResponse:
    resolver, resolved = _resolve(accept_language, locale)
    ctx = _write_context(request, resolved)
    result = delete_event(event_key, ctx, resolver)
    return _reply(result.model_dump(exclude_none=True), resolved, ctx.request_id)
