"""Cliente HTTP especializado para a Messenger Platform (Graph API).

Estende HttpClient genérico com comportamentos específicos do Messenger:
- URL base ``{api_base_url}/{api_version}``
- access_token da página enviado como query parameter
- Proxy de saída opcional (HTTP/HTTPS)
- Erros Meta (campo ``error`` no corpo) viram MessengerApiError,
  distintos de falhas de transporte (HttpError)
- Logging estruturado sem tokens nem conteúdo de mensagens

Sem retry: cada operação faz exatamente uma requisição.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from api.connectors.messenger.meta_errors import parse_meta_error
from api.connectors.messenger.meta_logging import log_meta_error, log_success
from app.infra.http import HttpClient, HttpClientConfig, HttpError, ProxyConfig, coerce_proxy
from config.settings.messenger import (
    API_VERSION_PATTERN,
    GRAPH_API_BASE_URL,
    GRAPH_API_VERSION,
    get_messenger_settings,
)

if TYPE_CHECKING:
    import httpx

    from config.settings import MessengerSettings

logger: logging.Logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = frozenset({"REGULAR", "SILENT_PUSH", "NO_PUSH"})
SENDER_ACTIONS = frozenset({"mark_seen", "typing_on", "typing_off"})
DEFAULT_PROFILE_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "profile_pic",
    "locale",
    "timezone",
    "gender",
)

MESSAGES_PATH = "/me/messages"
MESSAGE_ATTACHMENTS_PATH = "/me/message_attachments"
MESSENGER_PROFILE_PATH = "/me/messenger_profile"
# Template: o PSID vai só na URL, os logs registram o template
USER_PROFILE_PATH = "/{user_id}"


def _require(value: object, name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{name} é obrigatório")


def _require_fields(fields: Sequence[str], name: str) -> list[str]:
    if isinstance(fields, str) or not isinstance(fields, Sequence) or not fields:
        raise ValueError(f"{name} deve ser uma lista não vazia de strings")
    if not all(isinstance(field, str) and field.strip() for field in fields):
        raise ValueError(f"{name} contém valor inválido")
    return list(fields)


def _deprecated(old: str, new: str) -> None:
    warnings.warn(
        f"{old} está deprecated; use {new}",
        DeprecationWarning,
        stacklevel=3,
    )


class MessengerClient(HttpClient):
    """Cliente da Send/Profile API do Messenger.

    Args:
        page_access_token: Token de acesso da página
        api_version: Versão da Graph API (``vN.M``)
        api_base_url: URL base da Graph API
        proxy: ProxyConfig ou mapping ``{"hostname", "port"}``
        config: Configuração HTTP base
        transport: Transport httpx opcional (testes)

    Raises:
        ValueError: Se token vazio, versão inválida ou proxy incompleto
    """

    def __init__(
        self,
        page_access_token: str,
        *,
        api_version: str = GRAPH_API_VERSION,
        api_base_url: str = GRAPH_API_BASE_URL,
        proxy: ProxyConfig | Mapping[str, Any] | None = None,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not API_VERSION_PATTERN.match(api_version or ""):
            raise ValueError(f"api_version inválida: {api_version!r} (esperado vN.M)")
        if not page_access_token or not page_access_token.strip():
            raise ValueError(
                "page_access_token é obrigatório. "
                "Verifique se MESSENGER_PAGE_ACCESS_TOKEN está configurado."
            )

        super().__init__(config, transport)
        self.base_url = f"{api_base_url.rstrip('/')}/{api_version}"
        self._page_access_token = page_access_token
        self.proxy: ProxyConfig | None = None
        self.set_proxy(proxy)

    def __repr__(self) -> str:
        return f"MessengerClient(base_url={self.base_url!r}, proxy={self.proxy!r})"

    def set_proxy(self, proxy: ProxyConfig | Mapping[str, Any] | None) -> MessengerClient:
        """Define (ou remove, com None) o proxy de saída."""
        self.proxy = coerce_proxy(proxy)
        self._config.proxy_url = self.proxy.url if self.proxy else None
        return self

    # ── Requisição genérica ────────────────────────────────────────────────

    async def send_request(
        self,
        path: str,
        body: Mapping[str, Any] | None = None,
        method: str = "POST",
        params: Mapping[str, str] | None = None,
        *,
        path_params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Envia requisição autenticada à Graph API.

        Args:
            path: Caminho relativo à versão (ex: /me/messages), ou template
                (ex: /{user_id}) quando path_params é informado
            body: Corpo JSON (None para GET)
            method: Método HTTP
            params: Query params adicionais
            path_params: Valores do template; entram na URL, nunca nos logs

        Returns:
            Response JSON da Meta

        Raises:
            MessengerApiError: Se o corpo trouxer campo ``error``
            HttpError: Em falha de transporte ou resposta sem JSON válido
        """
        method = method.upper()
        path = path if path.startswith("/") else f"/{path}"
        query = {**(params or {}), "access_token": self._page_access_token}
        url_path = (
            path.format_map({key: quote(str(value), safe="") for key, value in path_params.items()})
            if path_params
            else path
        )
        response = await self.request(
            method,
            f"{self.base_url}{url_path}",
            params=query,
            json=dict(body) if body is not None else None,
            headers={"Content-Type": "application/json"},
        )
        return self._process_response(response, method, path)

    def _process_response(
        self,
        response: httpx.Response,
        method: str,
        path: str,
    ) -> dict[str, Any]:
        """Processa response da Graph API."""
        try:
            data = response.json()
        except ValueError as exc:
            logger.error(
                "messenger_api_invalid_json",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise HttpError("invalid_json_response", status_code=response.status_code) from exc

        meta_error = parse_meta_error(data, response.status_code)
        if meta_error is not None:
            log_meta_error(meta_error, method, path)
            raise meta_error

        if response.is_error:
            raise HttpError("http_status_error", status_code=response.status_code)

        if not isinstance(data, dict):
            raise HttpError("unexpected_response_body", status_code=response.status_code)

        log_success(method, path, response.status_code)
        return data

    # ── Send API ───────────────────────────────────────────────────────────

    async def send_message(
        self,
        message: Mapping[str, Any],
        recipient_id: str,
        notification_type: str = "REGULAR",
    ) -> dict[str, Any]:
        """Envia mensagem a um usuário (PSID)."""
        _require(recipient_id, "recipient.id")
        if not message:
            raise ValueError("message é obrigatório")
        if notification_type not in NOTIFICATION_TYPES:
            raise ValueError(f"notification_type inválido: {notification_type}")

        envelope = {
            "recipient": {"id": recipient_id},
            "message": dict(message),
            "notification_type": notification_type,
        }
        return await self.send_request(MESSAGES_PATH, envelope)

    async def send_action(self, action: str, recipient_id: str) -> dict[str, Any]:
        """Envia sender action (mark_seen, typing_on, typing_off)."""
        _require(recipient_id, "recipient.id")
        if action not in SENDER_ACTIONS:
            raise ValueError(f"sender_action inválido: {action}")

        envelope = {"recipient": {"id": recipient_id}, "sender_action": action}
        return await self.send_request(MESSAGES_PATH, envelope)

    async def mark_seen(self, recipient_id: str) -> dict[str, Any]:
        return await self.send_action("mark_seen", recipient_id)

    async def typing_toggle(self, typing: bool, recipient_id: str) -> dict[str, Any]:
        return await self.send_action("typing_on" if typing else "typing_off", recipient_id)

    async def upload_attachment(self, attachment: Mapping[str, Any]) -> str:
        """Faz upload reutilizável de anexo por URL e retorna o attachment_id.

        Args:
            attachment: ``{"type": "image", "payload": {"url": "..."}}``
        """
        if not attachment or not attachment.get("type"):
            raise ValueError("attachment.type é obrigatório")
        payload = attachment.get("payload")
        if not isinstance(payload, Mapping) or not payload:
            raise ValueError("attachment.payload é obrigatório")

        envelope = {
            "message": {
                "attachment": {
                    **attachment,
                    "payload": {**payload, "is_reusable": True},
                },
            },
        }
        data = await self.send_request(MESSAGE_ATTACHMENTS_PATH, envelope)
        attachment_id = data.get("attachment_id")
        if not attachment_id:
            raise HttpError("missing_attachment_id")
        return str(attachment_id)

    # ── User Profile API ───────────────────────────────────────────────────

    async def get_user_profile(
        self,
        user_id: str,
        fields: Sequence[str] = DEFAULT_PROFILE_FIELDS,
    ) -> dict[str, Any]:
        """Consulta campos do perfil de um usuário (PSID)."""
        _require(user_id, "user_id")
        selected = _require_fields(fields, "fields")
        return await self.send_request(
            USER_PROFILE_PATH,
            method="GET",
            params={"fields": ",".join(selected)},
            path_params={"user_id": user_id},
        )

    # ── Messenger Profile API ──────────────────────────────────────────────

    async def set_messenger_profile(self, profile: Mapping[str, Any]) -> dict[str, Any]:
        """Define propriedades do perfil do bot (greeting, get_started, ...)."""
        if not profile:
            raise ValueError("messenger_profile é obrigatório")
        if "fields" in profile:
            raise ValueError("messenger_profile não aceita 'fields' em set")
        return await self.send_request(MESSENGER_PROFILE_PATH, profile)

    async def get_messenger_profile(self, fields: Sequence[str]) -> dict[str, Any]:
        """Lê propriedades do perfil do bot."""
        selected = _require_fields(fields, "fields")
        return await self.send_request(
            MESSENGER_PROFILE_PATH,
            method="GET",
            params={"fields": ",".join(selected)},
        )

    async def delete_messenger_profile(self, fields: Sequence[str]) -> dict[str, Any]:
        """Remove propriedades do perfil do bot."""
        selected = _require_fields(fields, "fields")
        return await self.send_request(
            MESSENGER_PROFILE_PATH,
            {"fields": selected},
            method="DELETE",
        )

    # ── Aliases deprecated (mantidos por compatibilidade) ──────────────────

    async def send(
        self,
        message: Mapping[str, Any],
        recipient_id: str,
        notification_type: str = "REGULAR",
    ) -> dict[str, Any]:
        _deprecated("send", "send_message")
        return await self.send_message(message, recipient_id, notification_type)

    async def get_profile(
        self,
        user_id: str,
        fields: Sequence[str] = DEFAULT_PROFILE_FIELDS,
    ) -> dict[str, Any]:
        _deprecated("get_profile", "get_user_profile")
        return await self.get_user_profile(user_id, fields)

    async def sender_actions(self, action: str, recipient_id: str) -> dict[str, Any]:
        _deprecated("sender_actions", "send_action")
        return await self.send_action(action, recipient_id)

    async def view_bot_settings(self, fields: Sequence[str]) -> dict[str, Any]:
        _deprecated("view_bot_settings", "get_messenger_profile")
        return await self.get_messenger_profile(fields)

    async def update_bot_settings(self, profile: Mapping[str, Any]) -> dict[str, Any]:
        _deprecated("update_bot_settings", "set_messenger_profile")
        return await self.set_messenger_profile(profile)

    async def delete_bot_settings(self, fields: Sequence[str]) -> dict[str, Any]:
        _deprecated("delete_bot_settings", "delete_messenger_profile")
        return await self.delete_messenger_profile(fields)


def create_messenger_client(
    settings: MessengerSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> MessengerClient:
    """Factory para criar cliente Messenger com config padrão.

    Args:
        settings: MessengerSettings opcional. Se None, carrega do ambiente.
        transport: Transport httpx opcional (testes)

    Returns:
        Cliente HTTP configurado para o Messenger.
    """
    messenger = settings or get_messenger_settings()
    proxy = (
        ProxyConfig(hostname=messenger.proxy_host, port=messenger.proxy_port)
        if messenger.has_proxy
        else None
    )
    return MessengerClient(
        messenger.page_access_token,
        api_version=messenger.api_version,
        api_base_url=messenger.api_base_url,
        proxy=proxy,
        config=HttpClientConfig(timeout_seconds=messenger.request_timeout_seconds),
        transport=transport,
    )
