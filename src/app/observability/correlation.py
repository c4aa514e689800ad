"""Gerenciamento de correlation_id para rastreamento de requisições.

O correlation_id é propagado entre serviços e injetado em logs.
Usa ContextVar para ser thread/async-safe.

O valor pode vir do header ``x-correlation-id`` de um chamador não
confiável: só é aceito se curto e restrito a ``[A-Za-z0-9._-]``; caso
contrário um UUID novo é gerado.

Uso:
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar, Token

MAX_CORRELATION_ID_LENGTH = 128
_VALID_CORRELATION_ID = re.compile(r"[A-Za-z0-9._-]+")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (ou string vazia)."""
    return _correlation_id.get()


def is_valid_correlation_id(value: str | None) -> bool:
    """Indica se um correlation_id recebido pode ser reaproveitado."""
    if not value or len(value) > MAX_CORRELATION_ID_LENGTH:
        return False
    return _VALID_CORRELATION_ID.fullmatch(value) is not None


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None ou inválido, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id if is_valid_correlation_id(correlation_id) else generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())
