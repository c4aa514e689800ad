"""Filters de logging para injeção de contexto e redação de segredos.

Campos injetados:
- correlation_id: ID de rastreamento da requisição
- service: Nome do serviço (ex: messenger_connector)

O httpx loga a URL completa de cada request ("HTTP Request: POST ...").
Como o access_token da página vai na query string, toda mensagem passa
por ``AccessTokenRedactionFilter`` antes de ser formatada.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "***"

# access_token=<valor> em URLs/query strings (até &, espaço, aspas ou fim)
_ACCESS_TOKEN_RE = re.compile(r"(access_token=)[^&\s'\"]+", re.IGNORECASE)


def redact_access_token(text: str) -> str:
    """Substitui o valor de ``access_token=`` por ``***``."""
    return _ACCESS_TOKEN_RE.sub(rf"\g<1>{REDACTED}", text)


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record.

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class AccessTokenRedactionFilter(logging.Filter):
    """Remove access_token de mensagens e argumentos do record.

    Nunca descarta o record; apenas reescreve ``msg``/``args``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = redact_access_token(record.getMessage())
            record.args = None
        elif isinstance(record.msg, str):
            record.msg = redact_access_token(record.msg)
        return True
