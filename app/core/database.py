import logging
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from app.core.config import settings

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """
    Supabase hands out 'postgresql://' URLs and Heroku-style hosts 'postgres://'.
    The async engine needs the asyncpg driver spelled out.
    """
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return url


def _connect_args(url: str) -> dict:
    # Supabase production requires SSL; local Postgres and SQLite do not
    if url.startswith("postgresql+asyncpg://") and "localhost" not in url and "127.0.0.1" not in url:
        return {"ssl": "require"}
    return {}


DATABASE_URL = settings.DATABASE_URL
if not DATABASE_URL:
    logger.error("❌ DATABASE_URL is not set in the environment or .env file.")
    raise ValueError("DATABASE_URL must be set in the environment variables.")

DATABASE_URL = normalize_database_url(DATABASE_URL)

engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    future=True,
    connect_args=_connect_args(DATABASE_URL),
    pool_pre_ping=True,
    pool_recycle=300
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    class_=AsyncSession,
    expire_on_commit=False
)

Base = declarative_base()

async def get_db():
    """
    FastAPI dependency that provides a database session for each request.
    The session is closed once the request is finished.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
