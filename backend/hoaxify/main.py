import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from hoaxify.core.clock import now_millis
from hoaxify.core.config import settings
from hoaxify.core.errors import ValidationFailure
from hoaxify.core.i18n import request_locale, translate
from hoaxify.core.rate_limit import limiter
from hoaxify.dependencies.auth import get_identity
from hoaxify.routes.auth import router as auth_router
from hoaxify.routes.files import router as files_router
from hoaxify.routes.hoaxes import router as hoaxes_router
from hoaxify.routes.users import router as users_router
from hoaxify.services.files import create_folders, schedule_attachment_cleanup
from hoaxify.services.tokens import schedule_cleanup

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_folders()
    sweeps = []
    if settings.SWEEPS_ENABLED:
        sweeps = [schedule_cleanup(), schedule_attachment_cleanup()]
    try:
        yield
    finally:
        for sweep in sweeps:
            await sweep.stop()


app = FastAPI(
    title="Hoaxify",
    lifespan=lifespan,
    # Every request carrying a bearer token resolves (and refreshes) it.
    dependencies=[Depends(get_identity)],
)
logger.info(
    "Startup config: ENV=%s EMAIL_PROVIDER=%s UPLOAD_DIR=%s SWEEPS_ENABLED=%s",
    settings.ENV,
    settings.EMAIL_PROVIDER,
    settings.UPLOAD_DIR,
    settings.SWEEPS_ENABLED,
)


def error_body(request: Request, message_key: str, validation_errors: dict[str, str] | None = None) -> dict:
    locale = request_locale(request)
    payload: dict = {
        "path": request.url.path,
        "timestamp": now_millis(),
        "message": translate(message_key, locale),
    }
    if validation_errors:
        payload["validationErrors"] = {field: translate(key, locale) for field, key in validation_errors.items()}
    return payload


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail if isinstance(exc.detail, str) and exc.detail else "internal_error"
    validation_errors = exc.errors if isinstance(exc, ValidationFailure) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, detail, validation_errors),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = loc[-1] if loc else "body"
        errors.setdefault(field, "validation_failure")
    return JSONResponse(status_code=400, content=error_body(request, "validation_failure", errors))


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(request, "internal_error"))


if settings.ENABLE_RATE_LIMITING:
    app.state.limiter = limiter
    app.add_exception_handler(
        RateLimitExceeded,
        lambda request, exc: JSONResponse(  # noqa: ARG005
            status_code=429,
            content={"path": request.url.path, "timestamp": now_millis(), "message": "Too many requests"},
        ),
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(hoaxes_router)
app.include_router(files_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
