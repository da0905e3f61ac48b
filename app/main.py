import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root wherever uvicorn is started from
_PROJ_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJ_ROOT / ".env")

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException
from sqlmodel import Session

from app.api.admin import router as admin_router
from app.api.announcements import router as announcements_router
from app.api.auth import router as auth_router
from app.api.push import router as push_router
from app.core.config import Settings, get_settings
from app.core.database import build_engine, init_db, ping_db
from app.core.errors import StorefrontError
from app.core.rate_limit import limiter
from app.logging import setup_logging
from app.services.admins import seed_superadmin
from app.services.push import build_push_sender

log = logging.getLogger("storefront")


def _error_response(request: Request, status_code: int, detail: str, headers: dict | None = None) -> JSONResponse:
    rid = getattr(request.state, "request_id", None)
    body = {"error": detail, "status_code": status_code}
    if rid:
        body["request_id"] = rid
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _validation_error_message(exc: RequestValidationError) -> str:
    errs = exc.errors()
    if not errs:
        return "Invalid request."
    first = errs[0]
    loc = list(first.get("loc") or [])
    field = str(loc[-1]) if loc else None
    if first.get("type") == "missing":
        return f"Field '{field}' is required." if field and field != "body" else "Request body is required."
    msg = first.get("msg") or "Invalid request."
    # Pydantic prefixes messages raised from validators
    return msg.removeprefix("Value error, ")


def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.detail, exc.headers)


def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errs = exc.errors()
    log.info("Request validation error (422): path=%s method=%s", request.url.path, request.method)
    body = {"error": _validation_error_message(exc), "status_code": 422, "detail": jsonable_errors(errs)}
    rid = getattr(request.state, "request_id", None)
    if rid:
        body["request_id"] = rid
    return JSONResponse(status_code=422, content=body)


def jsonable_errors(errs) -> list[dict]:
    # ctx may hold the raw ValueError, which is not JSON serialisable
    return [{k: v for k, v in e.items() if k in ("type", "loc", "msg")} for e in errs]


def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(request, exc.status_code, detail, getattr(exc, "headers", None))


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    log.warning("rate limit exceeded path=%s", request.url.path)
    return _error_response(request, 429, "Too many requests. Please wait a minute.")


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled exception: path=%s %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Unexpected server error."})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Builds an app whose engine, push sender and settings live on app.state."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(app.state.engine)
        if settings.superadmin_password:
            with Session(app.state.engine) as db:
                seed_superadmin(db, settings.superadmin_username, settings.superadmin_password)
        log.info("Web Push configured: %s", "yes" if app.state.push_sender is not None else "NO (set VAPID_PRIVATE_KEY)")
        yield
        app.state.engine.dispose()

    app = FastAPI(
        title="Storefront API",
        description="Storefront admin back-office and announcement push API",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url)
    app.state.push_sender = build_push_sender(settings)
    app.state.limiter = limiter

    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.middleware("http")
    async def request_id_and_latency(request: Request, call_next):
        request.state.request_id = str(uuid.uuid4())
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request.state.request_id
        log.info(
            "request_id=%s method=%s path=%s status=%s latency_ms=%.2f",
            request.state.request_id,
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(auth_router)
    app.include_router(admin_router)
    app.include_router(announcements_router)
    app.include_router(push_router)

    @app.get("/health")
    def health(request: Request):
        db_ok = ping_db(request.app.state.engine)
        return {
            "status": "ok",
            "database": "ok" if db_ok else "error",
            "push_configured": request.app.state.push_sender is not None,
        }

    return app


setup_logging(level=get_settings().log_level)
app = create_app()
