# litcal_backend/app/main.py: backend entrypoint
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from litcal_backend.app.config.manifest import allowed_origins, app_env, log_level
from litcal_backend.app.errors import InternalServerError, LitCalError, StoreDecodeError
from litcal_backend.app.routers import temporale

PROBLEM_JSON = "application/problem+json"

# --- Logging -----------------------------------------------------------------
def _configure_logging() -> None:
    root = logging.getLogger("litcal")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(log_level())

_configure_logging()
log = logging.getLogger("litcal.temporale")

app = FastAPI(title="LitCal Temporale API")

# --- CORS ----------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[temporale.LOCALE_HEADER, "X-Request-Id"],
)

# --- Errors as problem+json ------------------------------------------------------
def _problem(err: LitCalError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.to_problem(), media_type=PROBLEM_JSON)

@app.exception_handler(LitCalError)
async def litcal_error_handler(request: Request, exc: LitCalError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _problem(exc)

@app.exception_handler(StoreDecodeError)
async def store_decode_error_handler(request: Request, exc: StoreDecodeError):
    log.error("%s %s: %s", request.method, request.url.path, exc)
    return _problem(InternalServerError(str(exc)))

# --- Routers -------------------------------------------------------------------
app.include_router(temporale.router)

# --- Health ------------------------------------------------------------------
@app.get("/health")
async def health():
    return {"ok": True, "env": app_env()}
