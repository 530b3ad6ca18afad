"""函数数据结构定义。

这些 dataclass 描述了可供模型调用的本地函数：
- FunctionParam / FunctionSchema: 随每次请求发给模型的声明式 schema。
- FunctionImplementation: 与 schema 同名注册的实现。
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union


# JSON Schema 中允许出现的参数类型
JSON_TYPES = ("string", "integer", "number", "boolean", "array", "object")

FunctionImplementation = Callable[..., Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class FunctionParam:
    """单个函数参数的定义。"""

    name: str
    type: str
    description: Optional[str] = None
    required: bool = False
    # 额外的 JSON Schema 字段，例如 {"enum": ["celsius", "fahrenheit"]}
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FunctionSchema:
    """一个可供模型调用的函数定义。"""

    name: str
    description: str
    params: Mapping[str, FunctionParam] = field(default_factory=dict)

    @property
    def required(self) -> List[str]:
        return [p.name for p in self.params.values() if p.required]

    def parameters(self) -> Dict[str, Any]:
        """返回 object 类型的 JSON Schema（type/properties/required）。"""

        properties: Dict[str, Any] = {}
        for name, param in self.params.items():
            prop: Dict[str, Any] = {"type": param.type}
            if param.description:
                prop["description"] = param.description
            prop.update(param.extra)
            properties[name] = prop
        return {"type": "object", "properties": properties, "required": self.required}
