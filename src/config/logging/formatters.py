"""Formatter JSON dos logs do conector.

Cada linha é um objeto JSON com os campos de LOG_FIELDS, na ordem em que
aparecem ali. ``asctime`` sai renomeado para ``timestamp`` em ISO 8601 UTC,
e os campos de ``extra={...}`` (ex.: ``reason``, ``body_length``) entram
depois dos fixos.

Nunca secrets, tokens ou corpos de webhook.
"""

from __future__ import annotations

import time

from pythonjsonlogger.json import JsonFormatter

# Campos fixos, em ordem de saída
LOG_FIELDS: tuple[str, ...] = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "level",
    "name": "logger",
}

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def create_json_formatter() -> JsonFormatter:
    """Cria o formatter JSON usado pelo handler raiz.

    Exemplo de output:
        {"timestamp": "2026-10-18T10:30:00Z", "level": "WARNING",
         "logger": "app.infra.crypto.signature",
         "message": "webhook_signature_rejected", "correlation_id": "abc-123",
         "service": "messenger_connector", "reason": "signature_mismatch",
         "algorithm": "sha256", "body_length": 412}
    """
    formatter = JsonFormatter(
        " ".join(f"%({name})s" for name in LOG_FIELDS),
        datefmt=TIMESTAMP_FORMAT,
        rename_fields=FIELD_RENAME_MAP,
    )
    formatter.converter = time.gmtime
    return formatter
