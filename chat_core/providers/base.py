"""Model Gateway 抽象接口。

Orchestrator 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- complete(conversation, schemas): 发送完整会话与函数 schema，返回一条 ModelReply。
- 失败统一抛出 GatewayError（reason 为 network / http-status / decode）。

每次调用相互独立，Gateway 本身不保存会话状态。
"""

from typing import Iterable, Protocol, Sequence

from chat_core.domain.models import Message, ModelReply
from chat_core.functions.definitions import FunctionSchema


class ModelGateway(Protocol):
    name: str

    async def complete(
        self,
        conversation: Iterable[Message],
        schemas: Sequence[FunctionSchema],
    ) -> ModelReply:
        ...
