"""Validação de assinatura HMAC para webhooks da Messenger Platform.

A Meta assina o corpo bruto de cada POST de webhook com o App Secret e envia
o resultado no header ``X-Hub-Signature`` (``sha1=<hex>``) ou
``X-Hub-Signature-256`` (``sha256=<hex>``).

Regras:
- O HMAC é calculado sobre os bytes exatos recebidos, antes de qualquer
  parse/re-serialização do JSON.
- A comparação é em tempo constante (``hmac.compare_digest``), nunca ``==``.
- Nunca logar secret, corpo ou digests; apenas motivo, algoritmo e tamanho.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import TYPE_CHECKING, Any, NoReturn

from utils.errors import ConfigurationError, InvalidSignatureError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

# Algoritmos aceitos, indexados pelo prefixo do header
SIGNATURE_ALGORITHMS: dict[str, Callable[..., Any]] = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}

DEFAULT_SIGNATURE_ALGORITHM = "sha1"


def _secret_to_bytes(secret: str | bytes | None) -> bytes:
    if secret is None:
        raise ConfigurationError("missing_app_secret")
    key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
    if not key:
        raise ConfigurationError("missing_app_secret")
    return key


def compute_signature(
    secret: str | bytes,
    raw_body: bytes,
    algorithm: str = DEFAULT_SIGNATURE_ALGORITHM,
) -> str:
    """Calcula a assinatura no formato do header (``<algoritmo>=<hex>``).

    Args:
        secret: App Secret (str é codificado em UTF-8)
        raw_body: Corpo bruto da requisição
        algorithm: Nome do algoritmo registrado em SIGNATURE_ALGORITHMS

    Raises:
        ConfigurationError: Se secret vazio ou algoritmo desconhecido

    Returns:
        Assinatura com digest hexadecimal em minúsculas
    """
    digestmod = SIGNATURE_ALGORITHMS.get(algorithm)
    if digestmod is None:
        raise ConfigurationError(f"unsupported_signature_algorithm: {algorithm}")
    digest = hmac.new(_secret_to_bytes(secret), raw_body, digestmod).hexdigest()
    return f"{algorithm}={digest}"


class SignatureVerifier:
    """Verifica assinaturas HMAC de webhooks com um App Secret fixo.

    O secret é capturado na construção e nunca muda; uma instância pode ser
    compartilhada entre threads/tasks sem lock.

    Args:
        secret: App Secret compartilhado com a Meta
        algorithms: Subconjunto de SIGNATURE_ALGORITHMS aceito por esta
            instância. Se None, aceita todos os registrados.

    Raises:
        ConfigurationError: Se secret ausente/vazio ou algoritmo desconhecido
    """

    __slots__ = ("_algorithms", "_secret")

    def __init__(
        self,
        secret: str | bytes | None,
        algorithms: Iterable[str] | None = None,
    ) -> None:
        self._secret = _secret_to_bytes(secret)

        names = tuple(algorithms) if algorithms is not None else tuple(SIGNATURE_ALGORITHMS)
        unknown = [name for name in names if name not in SIGNATURE_ALGORITHMS]
        if unknown or not names:
            raise ConfigurationError(
                f"unsupported_signature_algorithm: {', '.join(unknown) or '<empty>'}"
            )
        self._algorithms = frozenset(names)

    @property
    def algorithms(self) -> frozenset[str]:
        """Algoritmos aceitos por esta instância."""
        return self._algorithms

    def verify(self, declared_signature: str | None, raw_body: bytes) -> None:
        """Valida a assinatura declarada contra o corpo bruto.

        Args:
            declared_signature: Valor do header (``sha1=<hex>``)
            raw_body: Bytes exatos do corpo recebido

        Raises:
            TypeError: Se raw_body não for bytes
            InvalidSignatureError: Se header ausente, vazio, malformado,
                com algoritmo não suportado ou divergente
        """
        if not isinstance(raw_body, (bytes, bytearray, memoryview)):
            raise TypeError("raw_body deve ser bytes (corpo bruto, sem re-encoding)")

        body = bytes(raw_body)
        declared, algorithm = self._split(declared_signature, len(body))

        computed = hmac.new(self._secret, body, SIGNATURE_ALGORITHMS[algorithm]).hexdigest()
        expected = f"{algorithm}={computed}".encode("ascii")

        if not hmac.compare_digest(expected, declared.encode("ascii")):
            self._reject("signature_mismatch", algorithm, len(body))

        logger.debug(
            "webhook_signature_valid",
            extra={"algorithm": algorithm, "body_length": len(body)},
        )

    def _split(self, declared_signature: str | None, body_length: int) -> tuple[str, str]:
        if not declared_signature or not declared_signature.strip():
            self._reject("missing_signature", None, body_length)

        # Comparação exata: prefixo e hex em minúsculas, como a Meta envia
        declared = declared_signature.strip()
        algorithm, sep, digest = declared.partition("=")
        if not sep or not algorithm or not digest or not declared.isascii():
            self._reject("malformed_signature", None, body_length)

        if algorithm not in self._algorithms:
            self._reject("unsupported_algorithm", algorithm, body_length)

        return declared, algorithm

    @staticmethod
    def _reject(reason: str, algorithm: str | None, body_length: int) -> NoReturn:
        logger.warning(
            "webhook_signature_rejected",
            extra={
                "reason": reason,
                "algorithm": algorithm,
                "body_length": body_length,
            },
        )
        raise InvalidSignatureError(reason)
