import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse, PlainTextResponse
from prometheus_client import make_asgi_app
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ..config import Settings
from ..context import AppContext, get_context
from ..errors import BookingAPIError, BookingValidationError, ServiceUnavailable
from ..services.booking_service import INITIALIZING, list_bookings, submit_booking
from ..services.session_logger import log_session_event
from ..telemetry import (
    configure_logging,
    init_error_reporting,
    report_exception,
    submit_latency_seconds,
)
from ..utils.pii import scrub_payload
from ..utils.schemas import BookingForm, SessionEvent

log = logging.getLogger(__name__)

HEALTH_TEXT = "Hotel Devang Booking API is running ✅"
FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_body(request: Request) -> Dict[str, Any]:
    ctype = request.headers.get("content-type", "").lower()
    if ctype.startswith(FORM_TYPES):
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}
    try:
        data = await request.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _client_ip(req: Request) -> Optional[str]:
    # Prefer the proxy's forwarded address; fallback to socket peer
    fwd = req.headers.get("x-forwarded-for")
    if fwd:
        return fwd.split(",")[0].strip() or None
    return req.client.host if req.client else None


# --- Bookings ---
router = APIRouter()


@router.get("/")
async def health() -> PlainTextResponse:
    return PlainTextResponse(HEALTH_TEXT)


@router.get("/api/book")
async def get_bookings(ctx: AppContext = Depends(get_context)):
    data = await run_in_threadpool(list_bookings, ctx)
    return {"success": True, "data": data}


@router.post("/api/book")
async def create_booking(request: Request, ctx: AppContext = Depends(get_context)):
    start = time.perf_counter()
    try:
        if not ctx.store.ready:
            raise ServiceUnavailable(INITIALIZING)
        body = await _read_body(request)
        log.info("Received booking request: %s", scrub_payload(body))
        try:
            form = BookingForm.model_validate(body)
        except ValidationError:
            raise BookingValidationError("Missing required fields")
        return await run_in_threadpool(submit_booking, ctx, form, _client_ip(request))
    finally:
        if ctx.settings.obs_on:
            try:
                submit_latency_seconds.observe(time.perf_counter() - start)
            except Exception:
                pass


# --- Visitor sessions ---
sessions_router = APIRouter()


@sessions_router.post("/api/log-session")
async def log_session(request: Request, ctx: AppContext = Depends(get_context)):
    body = await _read_body(request)
    try:
        event = SessionEvent.model_validate(body)
    except ValidationError:
        event = SessionEvent()
    await run_in_threadpool(
        log_session_event,
        ctx,
        event,
        request.headers.get("user-agent"),
        _client_ip(request),
    )
    return {"success": True}


@asynccontextmanager
async def lifespan(app: FastAPI):
    ctx: AppContext = app.state.ctx
    s = ctx.settings
    if not ctx.store.ready:
        try:
            await run_in_threadpool(ctx.store.connect, s.mongo_uri, s.mongo_db, s.mongo_tls)
        except Exception as e:
            log.error("MongoDB connection failed: %s", e)
            report_exception(e)
            raise
    if s.unique_index:
        await run_in_threadpool(ctx.store.ensure_unique_index)
    yield
    ctx.store.close()


def create_app(
    settings: Optional[Settings] = None, ctx: Optional[AppContext] = None
) -> FastAPI:
    if ctx is None:
        ctx = AppContext.from_settings(settings or Settings.from_env())
    s = ctx.settings

    configure_logging(s.log_level)
    init_error_reporting(s.sentry_dsn)

    app = FastAPI(
        title="Hotel Devang Booking API",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    app.state.ctx = ctx

    # registered before CORS so unexpected 500s still carry CORS headers
    @app.middleware("http")
    async def unhandled_error_middleware(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            log.exception("Unhandled error on %s %s", request.method, request.url.path)
            report_exception(exc)
            return ORJSONResponse({"success": False, "error": str(exc)}, status_code=500)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=s.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        allow_credentials=s.cors_restricted,
    )

    @app.exception_handler(BookingAPIError)
    async def booking_error_handler(request: Request, exc: BookingAPIError):
        if exc.status_code >= 500 and exc.status_code != 503:
            report_exception(exc.__cause__ or exc)
        return ORJSONResponse(
            {"success": False, "error": exc.message}, status_code=exc.status_code
        )

    app.include_router(router)
    if s.session_log_enabled:
        app.include_router(sessions_router)

    # Expose /metrics for Prometheus (only if enabled)
    if s.obs_on:
        app.mount("/metrics", make_asgi_app())

    return app


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
