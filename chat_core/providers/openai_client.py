"""OpenAI chat/completions Provider 适配器（legacy function calling）。

- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>

请求字段：model/messages/functions/function_call/max_tokens。
每次 complete() 发起一次 POST，不重试、不缓存。
"""

from typing import Any, Dict, Iterable, Sequence

import httpx

from chat_core.config.settings import settings
from chat_core.domain.exceptions import GatewayError, ValidationError
from chat_core.domain.models import Message, ModelReply
from chat_core.functions.definitions import FunctionSchema
from chat_core.providers.registry import OPENAI_CONFIG, ModelConfig, get_model_config
from chat_core.providers.wire import function_to_payload, message_to_payload, reply_from_response


class OpenAIChatClient:
    """OpenAI Provider 客户端实现。"""

    name = "openai"
    function_call_mode = "auto"

    def __init__(self, cfg=settings):
        self._settings = cfg

    async def complete(
        self,
        conversation: Iterable[Message],
        schemas: Sequence[FunctionSchema],
    ) -> ModelReply:
        if not getattr(self._settings, "openai_api_key", None):
            raise ValidationError(code="MISSING_API_KEY", message="OPENAI_API_KEY not set")
        model_cfg = get_model_config(getattr(self._settings, "default_model", "function-chat"))
        payload = self.build_payload(conversation, schemas, model_cfg)
        base = getattr(self._settings, "openai_base_url", None) or OPENAI_CONFIG.base_url
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.post(
                    f"{base}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self._settings.openai_api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.TimeoutException as e:
            raise GatewayError("network", f"Request timed out: {e}", http_status=504) from e
        except httpx.RequestError as e:
            raise GatewayError("network", str(e)) from e
        if resp.status_code < 200 or resp.status_code >= 300:
            raise GatewayError("http-status", resp.text, http_status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise GatewayError("decode", f"Response is not JSON: {e}") from e
        return reply_from_response(data)

    def build_payload(
        self,
        conversation: Iterable[Message],
        schemas: Sequence[FunctionSchema],
        model_cfg: ModelConfig,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": model_cfg.provider_model,
            "messages": [message_to_payload(m) for m in conversation],
            "max_tokens": getattr(self._settings, "max_tokens", None) or model_cfg.max_tokens,
        }
        if schemas:
            payload["functions"] = [function_to_payload(s) for s in schemas]
            payload["function_call"] = self.function_call_mode
        return payload
