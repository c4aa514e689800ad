"""Testes do MessengerClient com httpx.MockTransport (sem rede)."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
import pytest

from api.connectors.messenger.http_client import (
    DEFAULT_PROFILE_FIELDS,
    MessengerClient,
    create_messenger_client,
)
from api.connectors.messenger.meta_errors import MessengerApiError
from app.infra.http import HttpClientConfig, HttpError, ProxyConfig
from config.settings import MessengerSettings

TOKEN = "page-token-123"


class _Recorder:
    """Handler do MockTransport que guarda as requests recebidas."""

    def __init__(self, status_code: int = 200, payload: Any = None, content: bytes | None = None):
        self.status_code = status_code
        self.payload = {"recipient_id": "42", "message_id": "mid.1"} if payload is None else payload
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.last.content)


def _client(recorder: _Recorder, **kwargs: Any) -> MessengerClient:
    return MessengerClient(TOKEN, transport=httpx.MockTransport(recorder), **kwargs)


class TestConstruction:
    def test_base_url_uses_version(self) -> None:
        client = MessengerClient(TOKEN, api_version="v2.8")
        assert client.base_url == "https://graph.facebook.com/v2.8"

    @pytest.mark.parametrize("version", ["2.8", "v2", "latest", ""])
    def test_invalid_api_version(self, version: str) -> None:
        with pytest.raises(ValueError, match="api_version"):
            MessengerClient(TOKEN, api_version=version)

    @pytest.mark.parametrize("token", ["", "   "])
    def test_missing_token(self, token: str) -> None:
        with pytest.raises(ValueError, match="page_access_token"):
            MessengerClient(token)

    def test_repr_does_not_leak_token(self) -> None:
        assert TOKEN not in repr(MessengerClient(TOKEN))


class TestProxy:
    def test_no_proxy_by_default(self) -> None:
        client = MessengerClient(TOKEN)
        assert client.proxy is None
        assert "proxy" not in client._client_options()

    def test_proxy_from_mapping(self) -> None:
        client = MessengerClient(TOKEN, proxy={"hostname": "proxy.local", "port": 3128})
        assert client.proxy == ProxyConfig(hostname="proxy.local", port=3128)
        assert client._client_options()["proxy"] == "http://proxy.local:3128"

    def test_set_proxy_replaces_and_removes(self) -> None:
        client = MessengerClient(TOKEN)
        assert client.set_proxy(ProxyConfig("p", 8080, "https")) is client
        assert client._client_options()["proxy"] == "https://p:8080"

        client.set_proxy(None)
        assert client.proxy is None
        assert "proxy" not in client._client_options()

    def test_proxy_without_port_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="port"):
            MessengerClient(TOKEN, proxy={"hostname": "proxy.local"})

    def test_set_proxy_does_not_leak_into_shared_config(self) -> None:
        shared = HttpClientConfig(timeout_seconds=5)
        first = MessengerClient(TOKEN, config=shared)
        second = MessengerClient(TOKEN, config=shared)

        first.set_proxy({"hostname": "proxy.local", "port": 3128})

        assert first._client_options()["proxy"] == "http://proxy.local:3128"
        assert second.proxy is None
        assert second.config.proxy_url is None
        assert "proxy" not in second._client_options()
        assert shared.proxy_url is None


class TestSendRequest:
    @pytest.mark.asyncio
    async def test_appends_access_token_as_query_param(self) -> None:
        recorder = _Recorder()
        await _client(recorder).send_request("/me/messages", {"a": 1})

        request = recorder.last
        assert request.method == "POST"
        assert request.url.path == "/v24.0/me/messages"
        assert request.url.params["access_token"] == TOKEN
        assert request.headers["content-type"] == "application/json"
        assert recorder.last_json() == {"a": 1}

    @pytest.mark.asyncio
    async def test_path_without_leading_slash(self) -> None:
        recorder = _Recorder()
        await _client(recorder).send_request("me/messages", {"a": 1})
        assert recorder.last.url.path == "/v24.0/me/messages"

    @pytest.mark.asyncio
    async def test_get_without_body_and_extra_params(self) -> None:
        recorder = _Recorder(payload={"id": "1"})
        result = await _client(recorder).send_request(
            "/123", method="get", params={"fields": "first_name"}
        )

        assert result == {"id": "1"}
        assert recorder.last.method == "GET"
        assert recorder.last.content == b""
        assert recorder.last.url.params["fields"] == "first_name"
        assert recorder.last.url.params["access_token"] == TOKEN

    @pytest.mark.asyncio
    async def test_error_field_raises_messenger_api_error(self) -> None:
        recorder = _Recorder(
            status_code=400,
            payload={
                "error": {
                    "message": "Invalid OAuth access token.",
                    "type": "OAuthException",
                    "code": 190,
                    "fbtrace_id": "AbC",
                }
            },
        )
        with pytest.raises(MessengerApiError) as exc_info:
            await _client(recorder).send_request("/me/messages", {"a": 1})

        error = exc_info.value
        assert error.error_type == "OAuthException"
        assert error.error_code == 190
        assert error.fbtrace_id == "AbC"
        assert error.status_code == 400
        assert error.is_permanent is True

    @pytest.mark.asyncio
    async def test_error_field_with_200_still_raises(self) -> None:
        recorder = _Recorder(payload={"error": {"message": "x", "code": 2}})
        with pytest.raises(MessengerApiError) as exc_info:
            await _client(recorder).send_request("/me/messages", {"a": 1})
        assert exc_info.value.is_transient is True

    @pytest.mark.asyncio
    async def test_non_json_body_is_http_error(self) -> None:
        recorder = _Recorder(status_code=502, content=b"<html>Bad Gateway</html>")
        with pytest.raises(HttpError) as exc_info:
            await _client(recorder).send_request("/me/messages", {"a": 1})

        assert not isinstance(exc_info.value, MessengerApiError)
        assert exc_info.value.status_code == 502
        assert str(exc_info.value) == "invalid_json_response"

    @pytest.mark.asyncio
    async def test_non_2xx_json_without_error_is_http_error(self) -> None:
        recorder = _Recorder(status_code=500, payload={"ok": False})
        with pytest.raises(HttpError, match="http_status_error"):
            await _client(recorder).send_request("/me/messages", {"a": 1})

    @pytest.mark.asyncio
    async def test_non_object_json_is_http_error(self) -> None:
        recorder = _Recorder(payload=[1, 2])
        with pytest.raises(HttpError, match="unexpected_response_body"):
            await _client(recorder).send_request("/me/messages", {"a": 1})

    @pytest.mark.asyncio
    async def test_connection_error_is_http_error(self) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("dns failure", request=request)

        client = MessengerClient(TOKEN, transport=httpx.MockTransport(_handler))
        with pytest.raises(HttpError, match="http_connection_error") as exc_info:
            await client.send_request("/me/messages", {"a": 1})
        assert not isinstance(exc_info.value, MessengerApiError)

    @pytest.mark.asyncio
    async def test_timeout_is_http_error(self) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = MessengerClient(TOKEN, transport=httpx.MockTransport(_handler))
        with pytest.raises(HttpError, match="http_timeout"):
            await client.send_request("/me/messages", {"a": 1})

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self) -> None:
        recorder = _Recorder(status_code=500, content=b"")
        with pytest.raises(HttpError):
            await _client(recorder).send_request("/me/messages", {"a": 1})
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_error_log_does_not_contain_token(self, caplog: pytest.LogCaptureFixture) -> None:
        recorder = _Recorder(status_code=400, payload={"error": {"message": "bad", "code": 100}})
        with caplog.at_level(logging.DEBUG):
            with pytest.raises(MessengerApiError):
                await _client(recorder).send_request("/me/messages", {"a": 1})

        api_logs = [r for r in caplog.records if r.name.startswith("api.")]
        assert api_logs
        assert all(TOKEN not in repr(r.__dict__) for r in api_logs)


class TestSendApi:
    @pytest.mark.asyncio
    async def test_send_message_envelope(self) -> None:
        recorder = _Recorder()
        result = await _client(recorder).send_message({"text": "oi"}, "42")

        assert result["message_id"] == "mid.1"
        assert recorder.last.url.path.endswith("/me/messages")
        assert recorder.last_json() == {
            "recipient": {"id": "42"},
            "message": {"text": "oi"},
            "notification_type": "REGULAR",
        }

    @pytest.mark.asyncio
    async def test_send_message_with_silent_push(self) -> None:
        recorder = _Recorder()
        await _client(recorder).send_message({"text": "oi"}, "42", "SILENT_PUSH")
        assert recorder.last_json()["notification_type"] == "SILENT_PUSH"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("message", "recipient", "notification"),
        [
            ({"text": "oi"}, "", "REGULAR"),
            ({"text": "oi"}, None, "REGULAR"),
            ({}, "42", "REGULAR"),
            ({"text": "oi"}, "42", "LOUD"),
        ],
    )
    async def test_send_message_validation(
        self, message: dict[str, Any], recipient: str | None, notification: str
    ) -> None:
        recorder = _Recorder()
        with pytest.raises(ValueError):
            await _client(recorder).send_message(message, recipient, notification)  # type: ignore[arg-type]
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_send_action(self) -> None:
        recorder = _Recorder()
        await _client(recorder).send_action("typing_on", "42")
        assert recorder.last_json() == {"recipient": {"id": "42"}, "sender_action": "typing_on"}

    @pytest.mark.asyncio
    async def test_send_action_invalid(self) -> None:
        with pytest.raises(ValueError, match="sender_action"):
            await _client(_Recorder()).send_action("dance", "42")

    @pytest.mark.asyncio
    async def test_mark_seen_and_typing_toggle(self) -> None:
        recorder = _Recorder()
        client = _client(recorder)

        await client.mark_seen("42")
        assert recorder.last_json()["sender_action"] == "mark_seen"
        await client.typing_toggle(True, "42")
        assert recorder.last_json()["sender_action"] == "typing_on"
        await client.typing_toggle(False, "42")
        assert recorder.last_json()["sender_action"] == "typing_off"

    @pytest.mark.asyncio
    async def test_upload_attachment_returns_id(self) -> None:
        recorder = _Recorder(payload={"attachment_id": "1857777774821032"})
        attachment = {"type": "image", "payload": {"url": "https://example.com/a.png"}}

        attachment_id = await _client(recorder).upload_attachment(attachment)

        assert attachment_id == "1857777774821032"
        assert recorder.last.url.path.endswith("/me/message_attachments")
        assert recorder.last_json() == {
            "message": {
                "attachment": {
                    "type": "image",
                    "payload": {"url": "https://example.com/a.png", "is_reusable": True},
                }
            }
        }

    @pytest.mark.asyncio
    async def test_upload_attachment_without_id_in_response(self) -> None:
        recorder = _Recorder(payload={"ok": True})
        with pytest.raises(HttpError, match="missing_attachment_id"):
            await _client(recorder).upload_attachment({"type": "file", "payload": {"url": "u"}})

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "attachment",
        [{}, {"type": "image"}, {"payload": {"url": "u"}}, {"type": "image", "payload": {}}],
    )
    async def test_upload_attachment_validation(self, attachment: dict[str, Any]) -> None:
        with pytest.raises(ValueError):
            await _client(_Recorder()).upload_attachment(attachment)


class TestProfileApis:
    @pytest.mark.asyncio
    async def test_get_user_profile_default_fields(self) -> None:
        recorder = _Recorder(payload={"first_name": "Ana"})
        profile = await _client(recorder).get_user_profile("1234")

        assert profile == {"first_name": "Ana"}
        assert recorder.last.method == "GET"
        assert recorder.last.url.path.endswith("/1234")
        assert recorder.last.url.params["fields"] == ",".join(DEFAULT_PROFILE_FIELDS)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "payload", "expected"),
        [
            (200, {"first_name": "Ana"}, None),
            (400, {"error": {"message": "bad", "code": 100}}, MessengerApiError),
        ],
    )
    async def test_get_user_profile_logs_path_template_not_psid(
        self,
        caplog: pytest.LogCaptureFixture,
        status_code: int,
        payload: dict[str, Any],
        expected: type[Exception] | None,
    ) -> None:
        psid = "5550001234"
        recorder = _Recorder(status_code=status_code, payload=payload)
        with caplog.at_level(logging.DEBUG):
            if expected is None:
                await _client(recorder).get_user_profile(psid)
            else:
                with pytest.raises(expected):
                    await _client(recorder).get_user_profile(psid)

        assert recorder.last.url.path.endswith(f"/{psid}")
        api_logs = [r for r in caplog.records if r.name.startswith("api.")]
        assert api_logs
        assert all(psid not in repr(r.__dict__) for r in api_logs)
        assert {r.path for r in api_logs} == {"/{user_id}"}

    @pytest.mark.asyncio
    async def test_path_params_are_url_quoted(self) -> None:
        recorder = _Recorder(payload={"id": "x"})
        await _client(recorder).send_request(
            "/{user_id}", method="GET", path_params={"user_id": "a/b"}
        )
        assert recorder.last.url.raw_path.split(b"?")[0].endswith(b"/a%2Fb")

    @pytest.mark.asyncio
    async def test_get_user_profile_custom_fields(self) -> None:
        recorder = _Recorder(payload={"locale": "pt_BR"})
        await _client(recorder).get_user_profile("1234", ["locale"])
        assert recorder.last.url.params["fields"] == "locale"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields", [[], "first_name", ["first_name", ""], [1]])
    async def test_get_user_profile_invalid_fields(self, fields: Any) -> None:
        with pytest.raises(ValueError, match="fields"):
            await _client(_Recorder()).get_user_profile("1234", fields)

    @pytest.mark.asyncio
    async def test_get_user_profile_requires_user_id(self) -> None:
        with pytest.raises(ValueError, match="user_id"):
            await _client(_Recorder()).get_user_profile("")

    @pytest.mark.asyncio
    async def test_set_messenger_profile(self) -> None:
        recorder = _Recorder(payload={"result": "success"})
        profile = {"greeting": [{"locale": "default", "text": "Olá!"}]}

        result = await _client(recorder).set_messenger_profile(profile)

        assert result == {"result": "success"}
        assert recorder.last.method == "POST"
        assert recorder.last.url.path.endswith("/me/messenger_profile")
        assert recorder.last_json() == profile

    @pytest.mark.asyncio
    @pytest.mark.parametrize("profile", [{}, {"fields": ["greeting"]}])
    async def test_set_messenger_profile_validation(self, profile: dict[str, Any]) -> None:
        with pytest.raises(ValueError):
            await _client(_Recorder()).set_messenger_profile(profile)

    @pytest.mark.asyncio
    async def test_get_messenger_profile(self) -> None:
        recorder = _Recorder(payload={"data": []})
        await _client(recorder).get_messenger_profile(["greeting", "get_started"])

        assert recorder.last.method == "GET"
        assert recorder.last.url.params["fields"] == "greeting,get_started"

    @pytest.mark.asyncio
    async def test_delete_messenger_profile(self) -> None:
        recorder = _Recorder(payload={"result": "success"})
        await _client(recorder).delete_messenger_profile(["greeting"])

        assert recorder.last.method == "DELETE"
        assert recorder.last_json() == {"fields": ["greeting"]}


class TestDeprecatedAliases:
    @pytest.mark.asyncio
    async def test_send_warns_and_delegates(self) -> None:
        recorder = _Recorder()
        with pytest.warns(DeprecationWarning, match="send_message"):
            await _client(recorder).send({"text": "oi"}, "42")
        assert recorder.last_json()["message"] == {"text": "oi"}

    @pytest.mark.asyncio
    async def test_get_profile_warns(self) -> None:
        recorder = _Recorder(payload={})
        with pytest.warns(DeprecationWarning, match="get_user_profile"):
            await _client(recorder).get_profile("1234")

    @pytest.mark.asyncio
    async def test_sender_actions_warns(self) -> None:
        recorder = _Recorder()
        with pytest.warns(DeprecationWarning, match="send_action"):
            await _client(recorder).sender_actions("mark_seen", "42")

    @pytest.mark.asyncio
    async def test_bot_settings_aliases_warn(self) -> None:
        recorder = _Recorder(payload={"result": "success"})
        client = _client(recorder)
        with pytest.warns(DeprecationWarning, match="get_messenger_profile"):
            await client.view_bot_settings(["greeting"])
        with pytest.warns(DeprecationWarning, match="set_messenger_profile"):
            await client.update_bot_settings({"greeting": []})
        with pytest.warns(DeprecationWarning, match="delete_messenger_profile"):
            await client.delete_bot_settings(["greeting"])


class TestFactory:
    def test_create_from_settings(self) -> None:
        settings = MessengerSettings(
            page_access_token=TOKEN,
            api_version="v19.0",
            request_timeout_seconds=5.0,
            proxy_host="proxy.local",
            proxy_port=8080,
        )
        client = create_messenger_client(settings)

        assert client.base_url == "https://graph.facebook.com/v19.0"
        assert client.config.timeout_seconds == 5.0
        assert client.proxy == ProxyConfig(hostname="proxy.local", port=8080)

    def test_create_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MESSENGER_PAGE_ACCESS_TOKEN", TOKEN)
        monkeypatch.delenv("MESSENGER_PROXY_HOST", raising=False)
        client = create_messenger_client()
        assert client.proxy is None

    def test_create_without_token_fails(self) -> None:
        with pytest.raises(ValueError):
            create_messenger_client(MessengerSettings())
