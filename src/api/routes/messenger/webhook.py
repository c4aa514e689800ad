"""Endpoints de webhook do Messenger.

Endpoints:
- GET /webhook/messenger: verificação de webhook (Meta challenge)
- POST /webhook/messenger: recebimento de eventos inbound

Segurança:
- Assinatura HMAC validada sobre o corpo bruto, antes do parse do JSON
- 401 para assinatura ausente/inválida, 400 para JSON inválido
- Sem App Secret a validação é pulada (bloqueado em produção no bootstrap)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status

from api.connectors.messenger.webhook.receive import (
    InvalidJsonError,
    parse_webhook_request,
)
from api.connectors.messenger.webhook.verify import (
    WebhookChallengeError,
    verify_webhook_challenge,
)
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from config.settings import get_messenger_settings
from utils.errors import InvalidSignatureError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def verify_webhook(request: Request) -> Response:
    """Verificação de webhook — responde ao challenge da Meta.

    Query params esperados:
    - hub.mode: deve ser "subscribe"
    - hub.verify_token: deve corresponder ao configurado
    - hub.challenge: valor a retornar

    Returns:
        Texto do challenge ou erro 403.
    """
    settings = get_messenger_settings()

    hub_mode = request.query_params.get("hub.mode")
    try:
        challenge = verify_webhook_challenge(
            hub_mode=hub_mode,
            hub_verify_token=request.query_params.get("hub.verify_token"),
            hub_challenge=request.query_params.get("hub.challenge"),
            expected_token=settings.verify_token,
        )
    except WebhookChallengeError as exc:
        logger.warning(
            "webhook_verification_failed",
            extra={"channel": "messenger", "error": str(exc)},
        )
        return Response(
            content="Forbidden",
            media_type="text/plain",
            status_code=status.HTTP_403_FORBIDDEN,
        )

    logger.info(
        "webhook_verified",
        extra={"channel": "messenger", "hub_mode": hub_mode},
    )
    # Meta espera o challenge como texto puro
    return Response(
        content=challenge,
        media_type="text/plain",
        status_code=status.HTTP_200_OK,
    )


@router.post("/", response_model=None)
async def receive_webhook(request: Request) -> Response | dict[str, Any]:
    """Recebimento de eventos inbound do Messenger.

    Validações:
    1. Assinatura HMAC (X-Hub-Signature-256 / X-Hub-Signature)
    2. JSON válido e objeto na raiz

    Returns:
        Confirmação de recebimento ou Response de erro.
    """
    token = set_correlation_id(request.headers.get("x-correlation-id"))

    try:
        settings = get_messenger_settings()

        # Corpo bruto: a assinatura vale para estes bytes exatos
        raw_body = await request.body()

        try:
            payload, signature_result = parse_webhook_request(
                raw_body=raw_body,
                headers=dict(request.headers),
                secret=settings.app_secret or None,
                algorithms=settings.signature_algorithms,
            )
        except InvalidSignatureError as exc:
            logger.warning(
                "webhook_signature_invalid",
                extra={
                    "channel": "messenger",
                    "error": exc.reason,
                    "payload_size": len(raw_body),
                },
            )
            return Response(
                content="Unauthorized",
                media_type="text/plain",
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        except InvalidJsonError as exc:
            logger.warning(
                "webhook_json_invalid",
                extra={"channel": "messenger", "error": str(exc)},
            )
            return Response(
                content="Bad Request",
                media_type="text/plain",
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        entries = payload.get("entry")
        logger.info(
            "webhook_received",
            extra={
                "channel": "messenger",
                "object": payload.get("object"),
                "entry_count": len(entries) if isinstance(entries, list) else 0,
                "signature_valid": signature_result.valid,
                "signature_skipped": signature_result.skipped,
                "signature_algorithm": signature_result.algorithm,
                "payload_size": len(raw_body),
            },
        )
        return {
            "status": "received",
            "correlation_id": get_correlation_id(),
        }
    finally:
        reset_correlation_id(token)
