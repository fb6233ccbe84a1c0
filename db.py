from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from settings import settings


POSTGRES_DSN = settings.postgres_dsn
# alembic runs on the sync psycopg2 driver
POSTGRES_DSN_SYNC = POSTGRES_DSN.replace("+asyncpg", "") if POSTGRES_DSN else ""

Base = declarative_base()

_engine = None
_SessionLocal = None
_alembic_engine = None


def _require_dsn(dsn: str) -> str:
    if not dsn or "://" not in dsn:
        raise RuntimeError("POSTGRES_DSN is not configured")
    return dsn


def get_engine():
    global _engine
    if _engine is None:
        _engine = create_async_engine(_require_dsn(POSTGRES_DSN), echo=settings.db_echo, pool_pre_ping=True)
    return _engine


def get_sessionmaker():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)
    return _SessionLocal


def get_alembic_engine():
    global _alembic_engine
    if _alembic_engine is None:
        _alembic_engine = create_engine(_require_dsn(POSTGRES_DSN_SYNC), echo=settings.db_echo)
    return _alembic_engine


class _LazySessionLocal:
    """Session factory that builds the engine on first use, not on import."""

    def __call__(self, *args, **kwargs):
        return get_sessionmaker()(*args, **kwargs)


SessionLocal = _LazySessionLocal()


async def dispose_engine() -> None:
    """Close pooled connections; the next session builds a fresh engine."""
    global _engine, _SessionLocal
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _SessionLocal = None
