"""Modelo base para todos os models"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, DateTime, func
from app.core.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normaliza datetimes sem fuso (SQLite) para UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BaseModel(Base):
    """Classe base abstrata para todos os modelos"""
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now
    )
