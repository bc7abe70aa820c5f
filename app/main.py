import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from limits import parse as parse_limit
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import Settings, SettingsDep, get_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import configure_logging, log_requests
from app.database import Database
from app.dependencies import enforce_rate_limit
from app.routers import auth, notifications, tasks

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database = Database.from_settings(settings)
    app.state.database = database

    # Production keeps serving without a database; requests fail individually.
    connected = await database.connect(raise_on_error=not settings.is_production)
    if connected and settings.auto_create_tables:
        await database.create_all()

    logger.info(f"Task Manager API started ({settings.environment})")
    yield

    logger.info("Shutting down")
    await database.dispose()


api_router = APIRouter()


@api_router.get("")
async def api_index():
    return {
        "success": True,
        "message": f"Task Manager API v{VERSION}",
        "documentation": {
            "auth": {
                "register": "POST /auth/register",
                "login": "POST /auth/login",
                "getCurrentUser": "GET /auth/me",
            },
            "tasks": {
                "getAll": "GET /tasks",
                "getOne": "GET /tasks/{id}",
                "create": "POST /tasks",
                "update": "PUT /tasks/{id}",
                "delete": "DELETE /tasks/{id}",
            },
            "notifications": {
                "getAll": "GET /notifications",
                "markAsRead": "PUT /notifications/{id}/read",
                "markAllAsRead": "PUT /notifications/read-all",
                "delete": "DELETE /notifications/{id}",
            },
            "health": "GET /health",
        },
        "status": "operational",
    }


@api_router.get("/health")
async def health_check(request: Request, settings: SettingsDep):
    database: Database = request.app.state.database
    return {
        "success": True,
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "database": {"status": await database.status()},
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
    }


api_router.include_router(auth.router)
api_router.include_router(tasks.router)
api_router.include_router(notifications.router)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Task Management API",
        description="Task and notification API with per-user authentication",
        swagger_ui_parameters={"displayRequestDuration": True},
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.limiter = Limiter(key_func=get_remote_address)

    register_exception_handlers(app)

    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        expose_headers=["Content-Range", "X-Content-Range"],
    )

    # Only the API is rate limited; "/", /docs and /openapi.json are not
    app.state.rate_limit = parse_limit(settings.rate_limit)
    app.include_router(
        api_router,
        prefix=settings.api_prefix,
        dependencies=[Depends(enforce_rate_limit)],
    )

    @app.get("/")
    async def root():
        return {
            "success": True,
            "message": "Welcome to Task Management API",
            "docs": "/docs",
            "api": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "version": VERSION,
            "environment": settings.environment,
        }

    return app


app = create_app()


def run():
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
