"""Settings específicas da Messenger Platform.

Configurações do canal Messenger via Graph API (Meta).
Cada canal deve ter seu próprio arquivo de settings para isolamento.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache

# Constantes do Graph API
GRAPH_API_VERSION: str = "v24.0"
GRAPH_API_BASE_URL: str = "https://graph.facebook.com"

API_VERSION_PATTERN = re.compile(r"^v\d+\.\d+$")
DEFAULT_SIGNATURE_ALGORITHMS: tuple[str, ...] = ("sha256", "sha1")


@dataclass(frozen=True)
class MessengerSettings:
    """Configurações do canal Messenger.

    Attributes:
        app_secret: App Secret para validação HMAC de webhooks
        verify_token: Token para verificação de webhook (hub.verify_token)
        page_access_token: Token de acesso da página à Graph API
        api_version: Versão da Graph API (ex: v24.0)
        api_base_url: URL base da Graph API
        request_timeout_seconds: Timeout para requisições HTTP
        proxy_host: Host do proxy de saída (vazio = sem proxy)
        proxy_port: Porta do proxy de saída
        signature_algorithms: Algoritmos aceitos no header de assinatura
    """

    # Credenciais (carregadas de env ou secret store)
    app_secret: str = ""
    verify_token: str = ""
    page_access_token: str = ""

    # API
    api_version: str = GRAPH_API_VERSION
    api_base_url: str = GRAPH_API_BASE_URL
    request_timeout_seconds: float = 30.0

    # Proxy
    proxy_host: str = ""
    proxy_port: int = 0

    # Webhook
    signature_algorithms: tuple[str, ...] = DEFAULT_SIGNATURE_ALGORITHMS

    @property
    def api_endpoint(self) -> str:
        """URL base completa da API com versão."""
        return f"{self.api_base_url}/{self.api_version}"

    @property
    def has_proxy(self) -> bool:
        return bool(self.proxy_host)

    def validate(self) -> list[str]:
        """Valida configurações mínimas do Messenger.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.app_secret:
            errors.append("MESSENGER_APP_SECRET não configurado")

        if not self.page_access_token:
            errors.append("MESSENGER_PAGE_ACCESS_TOKEN não configurado")

        if not API_VERSION_PATTERN.match(self.api_version):
            errors.append(f"MESSENGER_API_VERSION inválida: {self.api_version}")

        if self.request_timeout_seconds <= 0:
            errors.append("MESSENGER_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.proxy_host and not 0 < self.proxy_port < 65536:
            errors.append("MESSENGER_PROXY_PORT deve estar entre 1 e 65535")

        if not self.signature_algorithms:
            errors.append("MESSENGER_SIGNATURE_ALGORITHMS não pode ser vazio")

        return errors


def _parse_algorithms(raw: str) -> tuple[str, ...]:
    return tuple(name.strip().lower() for name in raw.split(",") if name.strip())


def _load_from_env() -> MessengerSettings:
    """Carrega MessengerSettings a partir de variáveis de ambiente."""
    return MessengerSettings(
        app_secret=os.getenv("MESSENGER_APP_SECRET", ""),
        verify_token=os.getenv("MESSENGER_VERIFY_TOKEN", ""),
        page_access_token=os.getenv("MESSENGER_PAGE_ACCESS_TOKEN", ""),
        api_version=os.getenv("MESSENGER_API_VERSION", GRAPH_API_VERSION),
        api_base_url=os.getenv("MESSENGER_API_BASE_URL", GRAPH_API_BASE_URL),
        request_timeout_seconds=float(
            os.getenv("MESSENGER_REQUEST_TIMEOUT_SECONDS", "30")
        ),
        proxy_host=os.getenv("MESSENGER_PROXY_HOST", ""),
        proxy_port=int(os.getenv("MESSENGER_PROXY_PORT", "0") or "0"),
        signature_algorithms=_parse_algorithms(
            os.getenv("MESSENGER_SIGNATURE_ALGORITHMS", ",".join(DEFAULT_SIGNATURE_ALGORITHMS))
        ),
    )


@lru_cache(maxsize=1)
def get_messenger_settings() -> MessengerSettings:
    """Retorna instância cacheada de MessengerSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
