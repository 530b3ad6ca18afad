"""Provider 与模型配置。

本模块将“逻辑模型名”与“具体厂商模型名”解耦：

- 逻辑名（logical_name）：在代码里使用的统一名称，例如 "function-chat"。
- provider_model：厂商实际提供的模型 ID，例如 "gpt-3.5-turbo-0613"。

上层只关心逻辑名，具体用哪个底层模型由这里集中配置。"""

from dataclasses import dataclass
from typing import Dict, Mapping


@dataclass
class ModelConfig:
    """单个逻辑模型的配置。"""

    logical_name: str
    provider_model: str
    max_tokens: int


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    models: Dict[str, ModelConfig]


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    base_url="https://api.openai.com/v1",
    models={
        "function-chat": ModelConfig(
            logical_name="function-chat",
            provider_model="gpt-3.5-turbo-0613",
            max_tokens=256,
        )
    },
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "openai": OPENAI_CONFIG,
}


def get_model_config(logical_name: str, provider: str = "openai") -> ModelConfig:
    """根据逻辑名获取 ModelConfig；未登记的名字按厂商模型 ID 原样使用。"""

    cfg = PROVIDER_REGISTRY[provider.lower()]
    if logical_name in cfg.models:
        return cfg.models[logical_name]
    default = next(iter(cfg.models.values()))
    return ModelConfig(
        logical_name=logical_name,
        provider_model=logical_name,
        max_tokens=default.max_tokens,
    )
