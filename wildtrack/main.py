# wildtrack/main.py
import logging
import logging.config
import time
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from wildtrack.config import settings
from wildtrack.database import init_db
from wildtrack.routes import auth, bookings, messages, safaris

logging.config.dictConfig({
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
    },
    "handlers": {
        "default": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "wildtrack": {"handlers": ["default"], "level": settings.LOG_LEVEL, "propagate": False},
    },
})
logger = logging.getLogger(__name__)

# Create the database tables
init_db()

app = FastAPI(
    title="UmZulu Wildtrack API",
    description="Safari package catalog, booking enquiries and contact messages",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


if settings.ENVIRONMENT.lower() == "development":
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        logger.info("%s %s -> %s in %.3fs", request.method, request.url.path, response.status_code, elapsed)
        return response


def _error_body(message: str, **extra) -> dict:
    return {"success": False, "message": message, **extra}


def _field_name(loc) -> str:
    # Drop the "body" / "query" / "path" prefix FastAPI puts in front
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


def _error_message(error: dict, field: str) -> str:
    if error.get("type") == "missing":
        return f"{field} is required"
    message = error.get("msg", "Invalid value")
    return message.removeprefix("Value error, ")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        field = _field_name(error.get("loc", ()))
        errors.append({"field": field, "message": _error_message(error, field)})
    return JSONResponse(status_code=400, content=_error_body("Validation error", errors=errors))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    extra = {}
    if not settings.is_production:
        extra["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=_error_body("Internal server error", **extra))


# Registering Routers
app.include_router(auth.router)
app.include_router(bookings.router)
app.include_router(messages.router)
app.include_router(safaris.router)


@app.get("/api/health", tags=["Root"])
def health():
    return {
        "success": True,
        "message": "UmZulu Wildtrack API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }


@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Welcome to the UmZulu Wildtrack API"}
