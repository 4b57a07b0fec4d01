"""Endpoint de verificação de integridade de dados"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.data_integrity import DataIntegrityChecker
from app.core.security import Principal, require_staff

router = APIRouter()


@router.get("/check")
async def check_data_integrity(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Verifica integridade dos dados no banco"""
    checker = DataIntegrityChecker(db)
    return await checker.check_data_consistency()
