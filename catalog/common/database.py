import logging

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from .config import Settings
from .db import Base
from ..products import model  # noqa: F401  registers the products table on Base.metadata

_logger = logging.getLogger(__name__)


def _is_memory_sqlite(db_url: str) -> bool:
    url = make_url(db_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _casefold(value):
    return value.casefold() if value is not None else None


def register_sqlite_functions(dbapi_conn, connection_record) -> None:
    dbapi_conn.create_function("casefold", 1, _casefold)


def build_engine(settings: Settings) -> AsyncEngine:
    kwargs = {"future": True, "echo": settings.DB_ECHO}
    if _is_memory_sqlite(settings.DB_URL):
        # Every connection to ":memory:" is a fresh database, so share one.
        kwargs.update({"poolclass": StaticPool, "connect_args": {"check_same_thread": False}})
    engine = create_async_engine(settings.DB_URL, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", register_sqlite_functions)
    _logger.info("Database engine created | url=%s", engine.url.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
