"""统一业务异常模型。

所有跨模块抛出的错误都继承自 BusinessError，Orchestrator 在一轮对话的
边界统一捕获，并通过 DisplaySink.on_error 交给展示层。
"""

from typing import Literal


GatewayReason = Literal["network", "http-status", "decode"]


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "GATEWAY_DECODE"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 function_name、turn_id 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class GatewayError(BusinessError):
    """Model Gateway 调用失败。

    reason 区分三种失败：
    - network: 连接失败、超时；
    - http-status: 远端返回非 2xx；
    - decode: 响应体无法解析为预期结构。
    """

    def __init__(self, reason: GatewayReason, message: str, http_status: int = 502, **extra):
        self.reason = reason
        code = "GATEWAY_" + reason.replace("-", "_").upper()
        super().__init__(code=code, message=message, http_status=http_status, **extra)


class FunctionNotFound(BusinessError):
    """模型请求了注册表中不存在的函数。"""

    def __init__(self, name: str):
        super().__init__(
            code="FUNCTION_NOT_FOUND",
            message=f"Function {name!r} not found or supported",
            http_status=404,
            function_name=name,
        )
        self.name = name


class ArgumentDecodeError(BusinessError):
    """函数参数不是合法 JSON 对象，或不满足 schema。"""

    def __init__(self, name: str, message: str):
        super().__init__(
            code="ARGUMENT_DECODE_ERROR",
            message=f"Invalid arguments for {name!r}: {message}",
            function_name=name,
        )
        self.name = name


class FunctionExecutionError(BusinessError):
    """函数实现本身抛出了异常。"""

    def __init__(self, name: str, message: str):
        super().__init__(
            code="FUNCTION_EXECUTION_ERROR",
            message=f"Function {name!r} failed: {message}",
            http_status=500,
            function_name=name,
        )
        self.name = name


class TurnInProgressError(BusinessError):
    """concurrent_submit="reject" 时，上一轮尚未结束又提交了新输入。"""

    def __init__(self):
        super().__init__(
            code="TURN_IN_PROGRESS",
            message="A turn is already in progress",
            http_status=409,
        )


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
