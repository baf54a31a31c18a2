from fastapi import HTTPException, Request
from sqlalchemy import select, false
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
import logging
import re

logger = logging.getLogger(__name__)

Base = declarative_base()


def async_database_url(url: str) -> str:
    """Point plain PostgreSQL and SQLite URLs at their async drivers"""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


class Database:
    """Owns the engine and session factory for one application run.

    Built during startup, disposed during shutdown. Request handlers get
    sessions through the ``get_db`` dependency, never from module state.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = async_database_url(url)
        self.engine = create_async_engine(
            self.url,
            echo=echo,
            poolclass=NullPool,
            pool_pre_ping=True,
        )
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=True,
        )

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def create_tables(self):
        """Create all database tables"""
        try:
            async with self.engine.begin() as conn:
                # Import all models to ensure they're registered
                from ..models import (
                    SchoolClass, Student, Teacher, Remark, Observation, Credential
                )

                logger.info("Creating database tables...")
                await conn.run_sync(Base.metadata.create_all)
                logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Error creating database tables: {e}")
            raise

    async def close(self):
        """Close database engine"""
        try:
            await self.engine.dispose()
            logger.info("Database engine disposed")
        except Exception as e:
            logger.error(f"Error disposing database engine: {e}")


async def get_db(request: Request):
    """Dependency to get database session"""
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise


def storage_error(e: Exception) -> HTTPException:
    """Map a failed query to a 500 carrying the driver's message"""
    orig = getattr(e, "orig", None)
    return HTTPException(status_code=500, detail=str(orig if orig is not None else e))


def id_matches(column, token: str):
    """Filter clause comparing an integer key column with a path token.

    The token is bound as a parameter; one that is not an integer can never
    match, so the clause is simply false.
    """
    if re.fullmatch(r"-?\d+", token):
        return column == int(token)
    return false()


async def ensure_exists(db: AsyncSession, model, object_id: int, label: str):
    """Reject a write that points at a row that is not there"""
    result = await db.execute(select(model.id).filter(model.id == object_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=400, detail=f"Unknown {label} {object_id}")
