"""Módulo de criptografia para webhooks da Messenger Platform.

Contém a validação HMAC da assinatura de webhooks (X-Hub-Signature /
X-Hub-Signature-256).

Localizado em app/infra/ para manter boundaries corretas:
- app/ não importa de api/ (exceto via bootstrap)
- api/connectors reutiliza o verificador sem duplicar a lógica
"""

from .signature import (
    DEFAULT_SIGNATURE_ALGORITHM,
    SIGNATURE_ALGORITHMS,
    SignatureVerifier,
    compute_signature,
)

__all__ = [
    "DEFAULT_SIGNATURE_ALGORITHM",
    "SIGNATURE_ALGORITHMS",
    "SignatureVerifier",
    "compute_signature",
]
