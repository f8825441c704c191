# lucid_backend/infrastructure/db/bootstrap.py
"""Async engine / session lifecycle.

``init_engine`` runs once at application startup (or from the test harness);
everything else reads the module-level ``engine`` and ``SessionLocal``.
"""
from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from lucid_backend.config import Settings

logger = logging.getLogger(__name__)

engine: Optional[AsyncEngine] = None
SessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


async def init_engine(cfg: Settings) -> None:
    global engine, SessionLocal
    if engine is not None:
        await engine.dispose()
    engine = create_async_engine(
        cfg.db_url,
        echo=cfg.db_echo,
        pool_size=cfg.db_pool_size,
        pool_pre_ping=True,
    )
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
    logger.info("Database engine initialised")


async def dispose_engine() -> None:
    global engine, SessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    SessionLocal = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; FastAPI closes it after the response."""
    if SessionLocal is None:
        raise RuntimeError("Database engine not initialised")
    async with SessionLocal() as session:
        yield session
