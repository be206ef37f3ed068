# openwaitlist/main.py

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from openwaitlist.api.v1.api import api_router
from openwaitlist.core.config import Settings, settings as default_settings
from openwaitlist.core.logging_config import configure_logging
from openwaitlist.db.init_db import bootstrap, create_database
from openwaitlist.db.interface import Database
from openwaitlist.exceptions import (
    DatabaseError,
    OpenWaitlistException,
    database_exception_handler,
    openwaitlist_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)

configure_logging(
    default_settings.log_level,
    default_settings.environment,
    default_settings.service_name,
)

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("openwaitlist.request")


def create_application(
    database: Optional[Database] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or default_settings
    if database is None:
        database = create_database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # nothing is served until the store is reachable and migrated
        logger.info(f"Starting {settings.PROJECT_NAME} in {settings.environment} mode")
        try:
            bootstrap(database, settings.db_dsn)
        except DatabaseError as exc:
            logger.error(f"Startup aborted: {exc}")
            raise
        Path(settings.avatar_path).mkdir(parents=True, exist_ok=True)
        yield
        logger.info(f"Shutting down {settings.PROJECT_NAME}")
        database.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings

    # ---------- CORS ----------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-JWT"],
    )

    # ---------- REQUEST LOG ----------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        request_logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)"
        )
        return response

    # ---------- ERRORS ----------
    app.add_exception_handler(OpenWaitlistException, openwaitlist_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DatabaseError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ---------- STATIC FILES ----------
    # user avatars; the directory may not exist until the first upload
    app.mount(
        "/avatar",
        StaticFiles(directory=settings.avatar_path, check_dir=False),
        name="avatar",
    )

    # ---------- ROUTERS ----------
    app.include_router(api_router)

    @app.get("/healthz", tags=["health"])
    def healthz():
        try:
            database.ping()
        except DatabaseError as exc:
            logger.warning(f"Health check failed: {exc}")
            return JSONResponse(status_code=503, content={"status": "unavailable"})
        return {"status": "ok"}

    return app


app = create_application()
