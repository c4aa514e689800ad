"""Helpers de logging para a Graph API (sem PII, sem tokens)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .meta_errors import MessengerApiError

logger = logging.getLogger(__name__)


def log_meta_error(
    meta_error: MessengerApiError,
    method: str,
    path: str,
) -> None:
    """Loga erro da Meta sem expor dados sensíveis."""
    logger.warning(
        "messenger_api_error",
        extra={
            "method": method,
            "path": path,
            "status_code": meta_error.status_code,
            "error_type": meta_error.error_type,
            "error_code": meta_error.error_code,
            "error_subcode": meta_error.error_subcode,
            "fbtrace_id": meta_error.fbtrace_id,
            "is_transient": meta_error.is_transient,
        },
    )


def log_success(
    method: str,
    path: str,
    status_code: int,
) -> None:
    """Loga sucesso sem expor dados sensíveis."""
    logger.debug(
        "messenger_api_success",
        extra={
            "method": method,
            "path": path,
            "status_code": status_code,
        },
    )
