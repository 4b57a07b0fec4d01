"""Core modules - configurações, banco, cache, segurança e erros"""
from app.core.config import settings
from app.core.database import get_db, Base, AsyncSessionLocal, SessionLocal
from app.core.cache import cache, CacheManager
from app.core.exceptions import APIException
from app.core.logging_config import setup_logging

__all__ = [
    "settings",
    "get_db",
    "Base",
    "AsyncSessionLocal",
    "SessionLocal",
    "cache",
    "CacheManager",
    "APIException",
    "setup_logging",
]
