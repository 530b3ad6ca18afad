import asyncio
import json

import httpx
import pytest

from chat_core.domain.exceptions import GatewayError, ValidationError
from chat_core.domain.models import FunctionCall, Message
from chat_core.functions import default_registry
from chat_core.providers import create_gateway
from chat_core.providers.openai_client import OpenAIChatClient


class SettingsStub:
    openai_api_key = "sk-test-0123456789"
    openai_base_url = "https://api.openai.com/v1"
    default_model = "function-chat"
    max_tokens = None
    http_timeout = 1.0


def _install_client(monkeypatch, resp=None, error=None, captured=None):
    class Client:
        def __init__(self, *a, **kw):
            if captured is not None:
                captured["client_kwargs"] = kw

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, headers=None):
            if captured is not None:
                captured.update(url=url, json=json, headers=headers)
            if error is not None:
                raise error
            return resp

    monkeypatch.setattr("httpx.AsyncClient", Client)


class Resp:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


def _complete(conversation):
    client = OpenAIChatClient(SettingsStub())
    return asyncio.run(client.complete(conversation, default_registry().schemas()))


def test_request_payload(monkeypatch):
    captured = {}
    body = {
        "id": "chatcmpl-1",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": "hello"}, "finish_reason": "stop"}
        ],
    }
    _install_client(monkeypatch, resp=Resp(body=body), captured=captured)
    _complete([Message.user("hi")])

    assert captured["url"] == "https://api.openai.com/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer sk-test-0123456789"
    assert captured["client_kwargs"]["timeout"] == 1.0
    payload = captured["json"]
    assert payload["model"] == "gpt-3.5-turbo-0613"
    assert payload["max_tokens"] == 256
    assert payload["function_call"] == "auto"
    assert payload["messages"] == [{"role": "user", "content": "hi"}]
    fn = payload["functions"][0]
    assert fn["name"] == "get_current_weather"
    assert fn["parameters"]["required"] == ["location"]


def test_text_reply(monkeypatch):
    body = {
        "id": "chatcmpl-2",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": "ok"}, "finish_reason": "stop"}
        ],
    }
    _install_client(monkeypatch, resp=Resp(body=body))
    reply = _complete([Message.user("hi")])
    assert reply.id == "chatcmpl-2"
    assert reply.text == "ok"
    assert reply.function_call is None
    assert reply.finish_reason == "stop"


def test_function_call_reply(monkeypatch):
    body = {
        "id": "chatcmpl-3",
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": None,
                    "function_call": {
                        "name": "get_current_weather",
                        "arguments": '{"location":"Boston, MA"}',
                    },
                },
                "finish_reason": "function_call",
            }
        ],
    }
    _install_client(monkeypatch, resp=Resp(body=body))
    reply = _complete([Message.user("weather?")])
    assert reply.text is None
    assert reply.function_call == FunctionCall(name="get_current_weather", arguments='{"location":"Boston, MA"}')


def test_http_status_error(monkeypatch):
    _install_client(monkeypatch, resp=Resp(status_code=500, text="upstream exploded"))
    with pytest.raises(GatewayError) as info:
        _complete([Message.user("hi")])
    assert info.value.reason == "http-status"
    assert info.value.code == "GATEWAY_HTTP_STATUS"
    assert info.value.http_status == 500


@pytest.mark.parametrize("error", [httpx.ConnectError("refused"), httpx.ReadTimeout("slow")])
def test_network_errors(monkeypatch, error):
    _install_client(monkeypatch, error=error)
    with pytest.raises(GatewayError) as info:
        _complete([Message.user("hi")])
    assert info.value.reason == "network"


@pytest.mark.parametrize(
    "resp",
    [
        Resp(text="<html>not json</html>"),
        Resp(body={"choices": []}),
        Resp(body={"id": "x", "choices": []}),
        Resp(body={"id": "x", "choices": [{"index": 0, "message": {"role": "assistant"}, "finish_reason": "stop"}]}),
        Resp(body={"id": "x", "choices": [{"index": 0, "message": {"content": "hi"}, "finish_reason": "stop"}]}),
    ],
)
def test_decode_errors(monkeypatch, resp):
    _install_client(monkeypatch, resp=resp)
    with pytest.raises(GatewayError) as info:
        _complete([Message.user("hi")])
    assert info.value.reason == "decode"


def test_missing_api_key(monkeypatch):
    class NoKey(SettingsStub):
        openai_api_key = None

    def fail(*a, **kw):
        raise AssertionError("no request expected")

    monkeypatch.setattr("httpx.AsyncClient", fail)
    client = OpenAIChatClient(NoKey())
    with pytest.raises(ValidationError) as info:
        asyncio.run(client.complete([Message.user("hi")], []))
    assert info.value.code == "MISSING_API_KEY"


def test_create_gateway():
    assert isinstance(create_gateway(), OpenAIChatClient)
