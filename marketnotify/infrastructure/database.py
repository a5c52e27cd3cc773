"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass

import logging

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from marketnotify.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreCapabilities:
    """Optional schema features detected once at startup."""

    push_tokens: bool


def build_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``."""

    if database_url.startswith("sqlite"):
        kwargs: dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            # One shared connection, otherwise every pool checkout sees an empty DB.
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


settings = get_settings()
engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database(bind: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from marketnotify.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)


def detect_store_capabilities(bind: Engine | None = None) -> StoreCapabilities:
    """Inspect the schema once and report which optional tables exist."""

    from marketnotify.infrastructure.models import PushTokenModel

    tables = set(inspect(bind or engine).get_table_names())
    capabilities = StoreCapabilities(push_tokens=PushTokenModel.__tablename__ in tables)
    logger.info("Detected store capabilities: %s", capabilities)
    return capabilities


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "StoreCapabilities",
    "build_engine",
    "detect_store_capabilities",
    "engine",
    "get_db",
    "initialize_database",
]
