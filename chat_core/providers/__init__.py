"""Model Gateway 集成层。

该包下的模块负责：
- 定义 Gateway 抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- chat/completions 的 JSON 编解码 (wire)。
- 具体实现 (openai_client)。
"""

from chat_core.config.settings import settings
from chat_core.providers.base import ModelGateway
from chat_core.providers.openai_client import OpenAIChatClient


def create_gateway() -> ModelGateway:
    """根据当前配置创建 Gateway 实例。"""

    return OpenAIChatClient(settings)


__all__ = ["ModelGateway", "OpenAIChatClient", "create_gateway"]
