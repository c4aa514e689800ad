"""Validação de assinatura a partir dos headers do webhook Messenger.

Adapta ``SignatureVerifier`` (app/infra/crypto) aos headers HTTP:
- ``X-Hub-Signature-256`` (sha256) tem precedência
- ``X-Hub-Signature`` (sha1, legado) é usado quando o primeiro falta
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.infra.crypto import SignatureVerifier
from utils.errors import InvalidSignatureError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

SIGNATURE_HEADER_SHA256 = "x-hub-signature-256"
SIGNATURE_HEADER_SHA1 = "x-hub-signature"
# Ordem de preferência: header -> algoritmo esperado
SIGNATURE_HEADERS: tuple[tuple[str, str], ...] = (
    (SIGNATURE_HEADER_SHA256, "sha256"),
    (SIGNATURE_HEADER_SHA1, "sha1"),
)


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da validação de assinatura (sem digests)."""

    valid: bool
    skipped: bool = False
    algorithm: str | None = None
    error: str | None = None


def extract_signature_header(
    headers: Mapping[str, str],
    algorithms: Iterable[str] | None = None,
) -> str | None:
    """Retorna o header de assinatura (case-insensitive), preferindo sha256.

    Com ``algorithms`` restrito, headers de algoritmos não aceitos só são
    devolvidos se nenhum header aceito estiver presente (o verificador
    então rejeita com ``unsupported_algorithm``).
    """
    lowered = {key.lower(): value for key, value in headers.items()}
    allowed = frozenset(algorithms) if algorithms is not None else None
    present = [
        (lowered[name], algorithm)
        for name, algorithm in SIGNATURE_HEADERS
        if lowered.get(name)
    ]
    for value, algorithm in present:
        if allowed is None or algorithm in allowed:
            return value
    return present[0][0] if present else None


def verify_meta_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | bytes | None,
    algorithms: Iterable[str] | None = None,
) -> SignatureResult:
    """Valida a assinatura do webhook a partir dos headers.

    Sem secret configurado a validação é pulada (``skipped=True``); cabe
    ao bootstrap impedir esse modo em produção.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos
        secret: App Secret
        algorithms: Algoritmos aceitos (None = todos os registrados)

    Returns:
        SignatureResult
    """
    if not secret:
        return SignatureResult(valid=True, skipped=True)

    if algorithms is not None:
        algorithms = tuple(algorithms)
    verifier = SignatureVerifier(secret, algorithms)
    declared = extract_signature_header(headers, algorithms)
    try:
        verifier.verify(declared, raw_body)
    except InvalidSignatureError as exc:
        return SignatureResult(valid=False, error=exc.reason)

    algorithm = declared.partition("=")[0].strip() if declared else None
    return SignatureResult(valid=True, algorithm=algorithm)
