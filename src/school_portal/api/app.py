"""
school_portal.api.app

FastAPI app factory for the school portal.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Create and dispose shared infrastructure (DB engine, sessions, storage, mail).
- Start and stop the hourly housekeeping job.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from school_portal.api.errors import install_exception_handlers
from school_portal.api.routers.auth import router as auth_router
from school_portal.api.routers.configuration import router as configuration_router
from school_portal.api.routers.contact import router as contact_router
from school_portal.api.routers.health import router as health_router
from school_portal.api.routers.index import router as index_router
from school_portal.api.routers.newsletter import router as newsletter_router
from school_portal.api.routers.resources import build_resource_router
from school_portal.db.init_db import init_db
from school_portal.db.session import create_engine, create_sessionmaker
from school_portal.jobs.housekeeping import HousekeepingScheduler, ensure_default_admin
from school_portal.observability.logging import configure_logging, get_logger
from school_portal.observability.middleware import RequestContextMiddleware
from school_portal.resources.catalog import REGISTRY
from school_portal.services.mailer import Mailer
from school_portal.services.storage import PUBLIC_PREFIX, LocalFileStorage
from school_portal.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        log_dir=settings.log_dir,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        session_factory = create_sessionmaker(engine)
        app.state.engine = engine
        app.state.sessionmaker = session_factory
        storage = LocalFileStorage(settings.upload_dir, public_base_url=settings.public_base_url)
        storage.root.mkdir(parents=True, exist_ok=True)
        app.state.storage = storage
        mailer = Mailer(settings)
        app.state.mailer = mailer
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        await ensure_default_admin(session_factory, settings)

        scheduler: HousekeepingScheduler | None = None
        if settings.housekeeping_enabled:
            scheduler = HousekeepingScheduler(
                session_factory=session_factory, settings=settings, mailer=mailer
            )
            scheduler.start()
        app.state.scheduler = scheduler
        try:
            yield
        finally:
            if scheduler is not None:
                await scheduler.stop()
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title=settings.api_name,
        version=settings.api_version,
        description=settings.api_description,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_exception_handlers(app, settings)

    app.mount(
        PUBLIC_PREFIX,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )
    app.include_router(health_router, tags=["health"])
    app.include_router(index_router)
    app.include_router(auth_router)
    # Bespoke routers first so their fixed paths win over generic `{id}` routes.
    app.include_router(configuration_router)
    app.include_router(newsletter_router)
    app.include_router(contact_router)
    app.include_router(build_resource_router(REGISTRY.values()))

    return app


# --- Module Notes -----------------------------------------------------------
# app composition stays here; business logic stays in routers/services/jobs.
