"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (app/bootstrap)
    configure_logging(level="INFO", service_name="messenger_connector")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("webhook_received", extra={"payload_size": 42})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- timestamp (ISO 8601 UTC)

Logs estruturados, sem PII (nunca secrets, tokens ou corpos de webhook).
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import (
    AccessTokenRedactionFilter,
    CorrelationIdFilter,
    redact_access_token,
)
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    LOG_FIELDS,
    TIMESTAMP_FORMAT,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "LOG_FIELDS",
    "TIMESTAMP_FORMAT",
    # Filters
    "AccessTokenRedactionFilter",
    "CorrelationIdFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
    "redact_access_token",
]
