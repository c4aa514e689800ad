"""Cliente HTTP base para chamadas externas (sem retry).

Falhas de transporte (timeout, DNS, conexão recusada, proxy) viram
``HttpError`` sem dados sensíveis. A interpretação do corpo da resposta
fica com o conector específico de cada plataforma.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    proxy_url: str | None = None


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HttpClient:
    """Cliente HTTP simples para chamadas externas.

    Args:
        config: Configuração base (timeout, headers, proxy)
        transport: Transport httpx opcional (ex.: httpx.MockTransport em testes)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        # Cópia própria: set_proxy e afins não vazam para outros clientes
        self._config = (
            replace(config, default_headers=dict(config.default_headers))
            if config is not None
            else HttpClientConfig()
        )
        self._transport = transport

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    def _client_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "verify": self._config.verify_ssl,
            "timeout": self._config.timeout_seconds,
        }
        if self._config.proxy_url:
            options["proxy"] = self._config.proxy_url
        if self._transport is not None:
            options["transport"] = self._transport
        return options

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Executa a requisição uma única vez.

        Raises:
            HttpError: Em falhas de transporte (timeout, conexão, proxy)
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        try:
            async with httpx.AsyncClient(**self._client_options()) as client:
                return await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=merged_headers,
                )
        except httpx.TimeoutException as exc:
            logger.warning("http_timeout", extra={"method": method})
            raise HttpError("http_timeout") from exc
        except httpx.TransportError as exc:
            logger.warning(
                "http_connection_error",
                extra={"method": method, "error_type": type(exc).__name__},
            )
            raise HttpError("http_connection_error") from exc
