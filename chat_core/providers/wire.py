"""chat/completions 的 JSON 结构与编解码。

请求体由 message_to_payload / function_to_payload 手工组装；
响应体用 pydantic 模型校验，任何结构偏差都会变成 GatewayError(reason="decode")。
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from chat_core.domain.exceptions import GatewayError
from chat_core.domain.models import FunctionCall, Message, ModelReply
from chat_core.functions.definitions import FunctionSchema


class WireFunctionCall(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    arguments: str


class WireMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: Literal["user", "assistant", "function"]
    content: Optional[str] = None
    function_call: Optional[WireFunctionCall] = None
    name: Optional[str] = None


class WireChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int
    message: WireMessage
    finish_reason: str


class WireResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    choices: List[WireChoice]


def message_to_payload(message: Message) -> Dict[str, Any]:
    # content 总是发送（可以为 null），function 消息必须带 name
    payload: Dict[str, Any] = {"role": message.role, "content": message.content}
    if message.function_call is not None:
        payload["function_call"] = {
            "name": message.function_call.name,
            "arguments": message.function_call.arguments,
        }
    if message.name is not None:
        payload["name"] = message.name
    return payload


def message_from_wire(wire: WireMessage) -> Message:
    call = None
    if wire.function_call is not None:
        call = FunctionCall(name=wire.function_call.name, arguments=wire.function_call.arguments)
    return Message(role=wire.role, content=wire.content, function_call=call, name=wire.name)


def message_from_payload(data: Dict[str, Any]) -> Message:
    try:
        wire = WireMessage.model_validate(data)
    except PydanticValidationError as e:
        raise GatewayError("decode", f"Unexpected message shape: {e}") from e
    return message_from_wire(wire)


def function_to_payload(schema: FunctionSchema) -> Dict[str, Any]:
    return {
        "name": schema.name,
        "description": schema.description,
        "parameters": schema.parameters(),
    }


def reply_from_response(data: Any) -> ModelReply:
    """把响应 JSON 解析为 ModelReply，只使用第一个 choice。

    同时给出 function_call 和文本时，以 function_call 为准。
    """

    try:
        resp = WireResponse.model_validate(data)
    except PydanticValidationError as e:
        raise GatewayError("decode", f"Unexpected response shape: {e}") from e
    if not resp.choices:
        raise GatewayError("decode", "Response has no choices", response_id=resp.id)
    choice = resp.choices[0]
    msg = choice.message
    if msg.function_call is not None:
        return ModelReply(
            id=resp.id,
            function_call=FunctionCall(name=msg.function_call.name, arguments=msg.function_call.arguments),
            finish_reason=choice.finish_reason,
        )
    if msg.content is None:
        raise GatewayError(
            "decode",
            "Reply carries neither text nor a function call",
            response_id=resp.id,
        )
    return ModelReply(id=resp.id, text=msg.content, finish_reason=choice.finish_reason)
