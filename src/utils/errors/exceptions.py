"""Exceções compartilhadas de configuração e de validação de webhook."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Configuração ausente ou inválida detectada no setup.

    Fatal: deve impedir o boot do serviço, nunca é tratada por request.
    """


class InvalidSignatureError(ValueError):
    """Assinatura de webhook ausente, malformada ou divergente.

    Recuperável por request: o chamador rejeita apenas a requisição
    (401/403). Nunca deve ser retentada.

    Attributes:
        reason: Motivo curto e sem PII (ex.: "signature_mismatch").
    """

    def __init__(self, reason: str = "invalid_signature") -> None:
        super().__init__(reason)
        self.reason = reason
