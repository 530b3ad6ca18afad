"""示例函数：查询天气。

固定返回同样的天气数据；实际使用时可以替换为后端或第三方天气 API。
"""

import json
from typing import Optional

from chat_core.functions.definitions import FunctionParam, FunctionSchema


GET_CURRENT_WEATHER = FunctionSchema(
    name="get_current_weather",
    description="Get the current weather in a given location",
    params={
        "location": FunctionParam(
            name="location",
            type="string",
            description="The city and state, e.g. San Francisco, CA",
            required=True,
        ),
        "unit": FunctionParam(
            name="unit",
            type="string",
            description="The unit of measurement, e.g. fahrenheit or celsius",
        ),
    },
)


def get_current_weather(location: str, unit: Optional[str] = None) -> str:
    weather_info = {
        "location": location,
        "temperature": "72",
        "unit": unit or "fahrenheit",
        "forecast": ["sunny", "windy"],
    }
    return json.dumps(weather_info, ensure_ascii=False, separators=(",", ":"))
