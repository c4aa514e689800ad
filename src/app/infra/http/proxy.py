"""Configuração de proxy de encaminhamento (HTTP/HTTPS) para clientes httpx."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

VALID_PROXY_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    """Proxy de saída.

    Attributes:
        hostname: Host do proxy (sem esquema)
        port: Porta TCP do proxy
        scheme: http|https
    """

    hostname: str
    port: int
    scheme: str = "http"

    def __post_init__(self) -> None:
        if not self.hostname or not str(self.hostname).strip():
            raise ValueError("proxy.hostname é obrigatório")
        if not isinstance(self.port, int) or isinstance(self.port, bool):
            raise ValueError("proxy.port deve ser inteiro")
        if not 0 < self.port < 65536:
            raise ValueError("proxy.port fora do intervalo 1-65535")
        if self.scheme not in VALID_PROXY_SCHEMES:
            raise ValueError(f"proxy.scheme inválido: {self.scheme}")

    @property
    def url(self) -> str:
        """URL do proxy no formato aceito pelo httpx."""
        return f"{self.scheme}://{self.hostname}:{self.port}"


def coerce_proxy(proxy: ProxyConfig | Mapping[str, Any] | None) -> ProxyConfig | None:
    """Converte mapping ``{"hostname", "port"}`` em ProxyConfig.

    Raises:
        ValueError: Se hostname/port ausentes ou inválidos
    """
    if proxy is None or isinstance(proxy, ProxyConfig):
        return proxy

    missing = [key for key in ("hostname", "port") if proxy.get(key) in (None, "")]
    if missing:
        raise ValueError(f"proxy sem campos obrigatórios: {', '.join(missing)}")

    try:
        port = int(proxy["port"])
    except (TypeError, ValueError) as exc:
        raise ValueError("proxy.port deve ser inteiro") from exc

    return ProxyConfig(
        hostname=str(proxy["hostname"]),
        port=port,
        scheme=str(proxy.get("scheme") or "http"),
    )
