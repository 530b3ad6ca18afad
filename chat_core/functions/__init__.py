"""本地函数注册与执行。

- definitions: FunctionSchema / FunctionParam。
- registry: FunctionRegistry，负责查找、参数校验和调用。
- weather: 示例函数 get_current_weather。
"""

from chat_core.functions.definitions import FunctionParam, FunctionSchema
from chat_core.functions.registry import FunctionRegistry
from chat_core.functions.weather import GET_CURRENT_WEATHER, get_current_weather


def default_registry() -> FunctionRegistry:
    """返回包含全部内置函数、已通过启动校验的注册表。"""

    registry = FunctionRegistry()
    registry.register(GET_CURRENT_WEATHER, get_current_weather)
    registry.validate()
    return registry


__all__ = ["FunctionParam", "FunctionSchema", "FunctionRegistry", "default_registry"]
