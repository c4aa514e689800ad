"""Conector Messenger - adapter de borda para a Graph API.

Este módulo é o único ponto de IO para o canal Messenger.
Responsabilidades:
- Webhook (receive, verify, signature)
- HTTP client para Send/Profile API (com proxy opcional)
- Erros da Graph API
"""

from .http_client import MessengerClient, create_messenger_client
from .meta_errors import MessengerApiError, is_transient_error, parse_meta_error
from .signature import SignatureResult, extract_signature_header, verify_meta_signature

__all__ = [
    "MessengerApiError",
    "MessengerClient",
    "SignatureResult",
    "create_messenger_client",
    "extract_signature_header",
    "is_transient_error",
    "parse_meta_error",
    "verify_meta_signature",
]
