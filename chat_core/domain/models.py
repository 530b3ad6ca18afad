"""统一的对话与结果数据模型。

本模块定义 Orchestrator、Gateway 与展示层之间共享的标准数据结构：

- Message: 对话日志中的一条消息（user/assistant/function）。
- FunctionCall: 模型发起的函数调用请求，arguments 保持原始 JSON 字符串。
- ModelReply: Gateway 解析后的单条回复，text 与 function_call 二选一。
- DisplayEvent: 交给展示层渲染的一条消息。

Gateway 负责在 API JSON 和这些模型之间做转换，其它模块只依赖这里的类型。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional
from uuid import uuid4

from .exceptions import ValidationError


# 与 chat/completions 的 role 字段一一对应
Role = Literal["user", "assistant", "function"]

Origin = Literal["user", "model"]


@dataclass(frozen=True)
class FunctionCall:
    """模型发起的一次函数调用请求（参数尚未校验）。"""

    name: str
    arguments: str


@dataclass(frozen=True)
class Message:
    """对话日志中的一条消息，写入后不可修改。

    - role: 消息角色。
    - content: 文本内容；assistant 发起函数调用时为 ""，解码得到的 null 为 None。
    - function_call: role 为 "assistant" 且模型请求调用函数时的调用信息。
    - name: role 为 "function" 时被调用的函数名。
    """

    role: Role
    content: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role == "function" and (not self.name or self.content is None):
            raise ValidationError(
                code="INVALID_FUNCTION_MESSAGE",
                message="function message requires both name and content",
            )

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role="user", content=text)

    @classmethod
    def assistant(cls, text: Optional[str]) -> "Message":
        return cls(role="assistant", content=text)

    @classmethod
    def function_request(cls, call: FunctionCall) -> "Message":
        return cls(role="assistant", content="", function_call=call)

    @classmethod
    def function_result(cls, name: str, result: str) -> "Message":
        return cls(role="function", content=result, name=name)


@dataclass(frozen=True)
class ModelReply:
    """一次 complete() 调用的结果。

    text 和 function_call 互斥：Gateway 保证恰好有一个非空。
    """

    id: str
    text: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    finish_reason: Optional[str] = None

    @property
    def is_function_call(self) -> bool:
        return self.function_call is not None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DisplayEvent:
    """展示层的一条消息（对应聊天窗口中的一个气泡）。"""

    text: str
    origin: Origin
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=_utcnow)
