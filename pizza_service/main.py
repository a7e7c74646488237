"""
JWT Pizza Service — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `crud/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from pizza_service.api.v1.api import api_router
from pizza_service.api.v1.endpoints.auth import limiter
from pizza_service.core.config import settings
from pizza_service.core.exceptions import register_exception_handlers
from pizza_service.crud import menu as menu_crud
from pizza_service.crud import tokens as token_crud
from pizza_service.crud import users as user_crud
from pizza_service.db.base import Base
from pizza_service.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from pizza_service.models.franchise import Franchise, Store  # noqa: F401
from pizza_service.models.order import MenuItem, Order, OrderItem  # noqa: F401
from pizza_service.models.token import RevokedToken  # noqa: F401
from pizza_service.models.user import Role, User, UserRole

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    async with async_session_factory() as session:
        # Seed default admin user on first run
        result = await session.execute(
            select(User).where(User.email == settings.FIRST_ADMIN_EMAIL.lower())
        )
        if result.scalar_one_or_none() is None:
            await user_crud.create(
                session,
                settings.FIRST_ADMIN_NAME,
                settings.FIRST_ADMIN_EMAIL,
                settings.FIRST_ADMIN_PASSWORD,
                roles=[UserRole(role=Role.ADMIN.value)],
            )
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                settings.FIRST_ADMIN_EMAIL,
            )

        if settings.SEED_MENU:
            added = await menu_crud.seed_default_menu(session)
            if added:
                logger.info("Seeded %d menu items", added)

        purged = await token_crud.purge_expired_revocations(session)
        if purged:
            logger.info("Purged %d expired token revocations", purged)

    logger.info("🍕 %s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title="JWT Pizza",
        description="Pizza ordering, menu and franchise administration API",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Login rate limiting
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)

    return application


app = create_app()
