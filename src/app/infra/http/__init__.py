"""Infra HTTP compartilhada (httpx)."""

from .client import HttpClient, HttpClientConfig, HttpError
from .proxy import ProxyConfig, coerce_proxy

__all__ = [
    "HttpClient",
    "HttpClientConfig",
    "HttpError",
    "ProxyConfig",
    "coerce_proxy",
]
