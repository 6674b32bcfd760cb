import logging
import time
from datetime import datetime, timezone
from typing import Optional

import redis
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .controller import TaskController
from .errors import TaskServiceError
from .logging_setup import setup_logging
from .repository import TaskRepository
from .routes import create_task_router
from .service import TaskService
from .users import HttpUserDirectory, InMemoryUserDirectory, UserDirectory
from .validators import issues_from

logger = logging.getLogger(__name__)


def format_uptime(seconds: int) -> str:
    """1d 2h 3m 4s, dropping leading zero units."""
    days, rest = divmod(int(seconds), 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if parts or hours:
        parts.append(f"{hours}h")
    if parts or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)


def build_user_directory(settings: Settings) -> UserDirectory:
    if settings.user_service_base:
        logger.info("Using remote user directory base=%s", settings.user_service_base)
        return HttpUserDirectory(settings.user_service_base)
    logger.info("Using in-memory development user directory")
    return InMemoryUserDirectory()


def create_app(
    settings: Optional[Settings] = None,
    redis_client: Optional[redis.Redis] = None,
    users: Optional[UserDirectory] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    if redis_client is None:
        redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            decode_responses=True,
        )

    repository = TaskRepository(redis_client, logger=logging.getLogger("task_service.repository"))
    service = TaskService(repository, logger=logging.getLogger("task_service.service"))

    app = FastAPI(title="Task Service")
    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.users = users if users is not None else build_user_directory(settings)
    app.state.controller = TaskController(service, logger=logging.getLogger("task_service.controller"))

    http_log = logging.getLogger("task_service.http")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        http_log.info(
            "Incoming request method=%s path=%s user_agent=%s",
            request.method,
            request.url.path,
            request.headers.get("user-agent"),
        )
        try:
            response = await call_next(request)
        except Exception:
            http_log.error(
                "Request failed method=%s path=%s duration_ms=%.1f",
                request.method,
                request.url.path,
                (time.perf_counter() - start) * 1000,
            )
            raise
        http_log.info(
            "Request completed method=%s path=%s status=%d duration_ms=%.1f user=%s",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
            getattr(request.state, "user_id", "unauthenticated"),
        )
        return response

    @app.get("/health")
    async def health():
        uptime = int(time.monotonic() - app.state.started_at)
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": {"seconds": uptime, "formatted": format_uptime(uptime)},
        }

    app.include_router(create_task_router(settings.api_prefix))

    @app.exception_handler(TaskServiceError)
    async def task_service_error_handler(request: Request, exc: TaskServiceError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "issues": issues_from(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # a known path with an unsupported method is just another unmatched route
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Not Found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Request error method=%s path=%s error=%s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal Server Error"})

    return app


def run() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server starting host=%s port=%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
