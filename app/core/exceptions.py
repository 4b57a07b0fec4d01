"""
Exceções de domínio da API.

Todas derivam de HTTPException para que possam ser levantadas tanto nos
services quanto nos endpoints; o handler registrado em app.main adiciona o
campo "error" com o tipo da falha.
"""
from typing import Optional

from fastapi import HTTPException, status


class APIException(HTTPException):
    """Exceção base com tipo de erro estruturado."""

    kind = "error"

    def __init__(self, status_code: int, detail: str, headers: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundException(APIException):
    """Entidade não encontrada."""

    kind = "not_found"

    def __init__(self, detail: str = "Recurso não encontrado"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidStateException(APIException):
    """Operação não permitida no status atual da partida/entidade."""

    kind = "invalid_state"

    def __init__(self, detail: str = "Operação não permitida no status atual"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ValidationException(APIException):
    """Entrada malformada ou inconsistente."""

    kind = "validation_failure"

    def __init__(self, detail: str = "Requisição inválida"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictException(APIException):
    """Conflito de unicidade (ex.: número de camisa duplicado)."""

    kind = "conflict"

    def __init__(self, detail: str = "Conflito com recurso existente"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnauthorizedException(APIException):
    """Autenticação ausente ou inválida."""

    kind = "unauthorized"

    def __init__(self, detail: str = "Autenticação necessária"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(APIException):
    """Usuário autenticado sem permissão para a operação."""

    kind = "forbidden"

    def __init__(self, detail: str = "Acesso negado"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
