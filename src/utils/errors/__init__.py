"""Exceções utilitárias compartilhadas."""

from .exceptions import ConfigurationError, InvalidSignatureError

__all__ = [
    "ConfigurationError",
    "InvalidSignatureError",
]
