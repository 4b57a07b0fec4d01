"""Configuração do banco de dados async e sync"""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy import create_engine
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

# Base para modelos SQLAlchemy
Base = declarative_base()


def get_sync_database_url() -> str:
    """Converte URL async para sync"""
    url = settings.database_url
    if url.startswith("postgresql+asyncpg://"):
        return url.replace("postgresql+asyncpg://", "postgresql+psycopg2://")
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg2://")
    elif url.startswith("sqlite+aiosqlite://"):
        return url.replace("sqlite+aiosqlite://", "sqlite://")
    return url


def get_async_database_url() -> str:
    """Garante URL async com asyncpg (ou aiosqlite em ambiente local)"""
    url = settings.database_url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")
    elif url.startswith("postgresql+psycopg2://"):
        return url.replace("postgresql+psycopg2://", "postgresql+asyncpg://")
    elif url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://")
    return url


def _pool_options(url: str, pool_size: int, max_overflow: int) -> dict:
    """Opções de pool (SQLite não aceita pool_size)"""
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


async_url = get_async_database_url()
engine = create_async_engine(
    async_url,
    echo=settings.DEBUG,
    future=True,
    **_pool_options(async_url, pool_size=20, max_overflow=10),
)

# Engine sync para tasks Celery e webhooks
sync_url = get_sync_database_url()
sync_engine = create_engine(
    sync_url,
    echo=settings.DEBUG,
    **_pool_options(sync_url, pool_size=10, max_overflow=5),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

SessionLocal = sessionmaker(
    bind=sync_engine,
    class_=Session,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """
    Dependency async para obter sessão do banco de dados.
    Uso: db: AsyncSession = Depends(get_db)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Inicializa o banco de dados criando todas as tabelas"""
    import app.models  # noqa: F401  registra os modelos no metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Banco de dados inicializado")


async def close_db():
    """Fecha todas as conexões do banco"""
    await engine.dispose()
    logger.info("Conexões do banco de dados fechadas")
