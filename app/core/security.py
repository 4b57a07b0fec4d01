"""Autenticação JWT e autorização por papel"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.exceptions import ForbiddenException, UnauthorizedException

logger = logging.getLogger(__name__)

ROLES = ("admin", "coach", "assistant_coach")
STAFF_ROLES = ("coach", "admin")

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Usuário autenticado extraído do token"""
    user_id: str
    role: str


def create_access_token(user_id: str, role: str, expires_minutes: Optional[int] = None) -> str:
    """Gera token JWT assinado com o papel do usuário"""
    if role not in ROLES:
        raise ValueError(f"Papel inválido: {role}")
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES
    )
    payload = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Principal:
    """Valida token e retorna o principal"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedException("Token expirado")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Token inválido: {e}")
        raise UnauthorizedException("Token inválido")

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in ROLES:
        raise UnauthorizedException("Token sem usuário ou papel válido")
    return Principal(user_id=user_id, role=role)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """Dependency: exige token Bearer válido"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Não autorizado, token ausente")
    return decode_access_token(credentials.credentials)


def require_roles(*roles: str):
    """
    Dependency factory que restringe a rota aos papéis informados.
    Uso: principal: Principal = Depends(require_roles("coach", "admin"))
    """
    async def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            raise ForbiddenException(
                f"Papel '{principal.role}' não tem permissão para esta operação"
            )
        return principal

    return checker


require_staff = require_roles(*STAFF_ROLES)
