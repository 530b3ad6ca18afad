"""Chat Core 顶层包。

一个支持 function calling 的最小聊天客户端核心：
函数注册表、Model Gateway、会话编排状态机，以及配置与日志。
"""

from chat_core.agents import ConversationOrchestrator, OrchestratorState, TurnResult
from chat_core.functions import FunctionRegistry, default_registry

__all__ = [
    "ConversationOrchestrator",
    "FunctionRegistry",
    "OrchestratorState",
    "TurnResult",
    "default_registry",
]
