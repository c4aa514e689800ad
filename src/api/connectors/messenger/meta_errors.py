"""Erros e helpers de parsing para a Graph API (Messenger Platform)."""

from __future__ import annotations

from typing import Any

from app.infra.http import HttpError

# Códigos da Graph API que indicam falha temporária (throttling/indisponibilidade)
TRANSIENT_ERROR_CODES = frozenset({1, 2, 4, 17, 32, 613})


class MessengerApiError(HttpError):
    """Erro retornado no campo ``error`` do corpo da Graph API.

    Distinto de HttpError puro (falha de transporte): aqui a Meta respondeu
    e recusou a operação.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: str = "unknown",
        error_code: int = 0,
        error_subcode: int | None = None,
        fbtrace_id: str | None = None,
        is_transient: bool = False,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.error_type = error_type
        self.error_code = error_code
        self.error_subcode = error_subcode
        self.fbtrace_id = fbtrace_id
        self.is_transient = is_transient

    @property
    def is_permanent(self) -> bool:
        return not self.is_transient


def is_transient_error(error_code: int, flagged_transient: object = None) -> bool:
    """Classifica erro como transitório.

    A Graph API às vezes marca ``is_transient: true`` explicitamente;
    caso contrário usa a tabela de códigos conhecidos.
    """
    if flagged_transient is True:
        return True
    return error_code in TRANSIENT_ERROR_CODES


def parse_meta_error(
    response_data: Any,
    status_code: int | None = None,
) -> MessengerApiError | None:
    """Extrai o erro do response da Meta.

    Args:
        response_data: Corpo JSON já decodificado
        status_code: Status HTTP da resposta (apenas informativo)

    Returns:
        MessengerApiError se houver campo ``error``, None se sucesso
    """
    if not isinstance(response_data, dict) or "error" not in response_data:
        return None

    error_obj = response_data["error"]
    if not isinstance(error_obj, dict):
        return MessengerApiError(str(error_obj), status_code=status_code)

    error_code = error_obj.get("code", 0)
    if not isinstance(error_code, int):
        error_code = 0

    return MessengerApiError(
        str(error_obj.get("message", "Erro desconhecido")),
        error_type=str(error_obj.get("type", "unknown")),
        error_code=error_code,
        error_subcode=error_obj.get("error_subcode"),
        fbtrace_id=error_obj.get("fbtrace_id"),
        is_transient=is_transient_error(error_code, error_obj.get("is_transient")),
        status_code=status_code,
    )
