"""函数注册表。

把函数名映射到实现与 schema，并负责把模型给出的原始参数 JSON
校验为实现可以直接使用的关键字参数。
"""

import inspect
import json
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, create_model
from pydantic import ValidationError as PydanticValidationError

from chat_core.domain.exceptions import (
    ArgumentDecodeError,
    FunctionExecutionError,
    FunctionNotFound,
    ValidationError,
)
from chat_core.domain.models import FunctionCall
from chat_core.functions.definitions import (
    JSON_TYPES,
    FunctionImplementation,
    FunctionSchema,
)
from chat_core.infrastructure.logging.logger import logger


_PY_TYPES: Dict[str, Any] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "array": list,
    "object": dict,
}


def _arguments_model(schema: FunctionSchema) -> Type[BaseModel]:
    """根据 schema 生成用于校验参数的 pydantic 模型。

    字段使用内部名 p0、p1…，参数名只作为 alias，
    这样 "_token"、"model_config" 之类的名字不会被 pydantic 当成私有属性或配置。
    """

    fields: Dict[str, Tuple[Any, Any]] = {}
    for i, (name, param) in enumerate(schema.params.items()):
        py_type = _PY_TYPES[param.type]
        if param.required:
            fields[f"p{i}"] = (py_type, Field(..., alias=name))
        else:
            fields[f"p{i}"] = (Optional[py_type], Field(None, alias=name))
    return create_model(
        f"{schema.name}_arguments",
        __config__=ConfigDict(extra="ignore"),
        **fields,
    )


class FunctionRegistry:
    """Registry for local functions the model may call."""

    def __init__(self) -> None:
        self._schemas: Dict[str, FunctionSchema] = {}
        self._implementations: Dict[str, FunctionImplementation] = {}
        self._models: Dict[str, Type[BaseModel]] = {}

    def register(self, schema: FunctionSchema, implementation: FunctionImplementation) -> None:
        if schema.name in self._schemas:
            raise ValidationError(
                code="DUPLICATE_FUNCTION",
                message=f"Function {schema.name!r} already registered",
            )
        for param in schema.params.values():
            if param.type not in JSON_TYPES:
                raise ValidationError(
                    code="INVALID_FUNCTION_SCHEMA",
                    message=f"{schema.name}.{param.name}: unsupported type {param.type!r}",
                )
        self._schemas[schema.name] = schema
        self._implementations[schema.name] = implementation
        self._models[schema.name] = _arguments_model(schema)

    def lookup(self, name: str) -> FunctionImplementation:
        try:
            return self._implementations[name]
        except KeyError:
            raise FunctionNotFound(name) from None

    def schemas(self) -> List[FunctionSchema]:
        return list(self._schemas.values())

    def names(self) -> List[str]:
        return list(self._schemas)

    def validate(self) -> None:
        """启动时检查 schema 与实现一一对应。"""

        dangling_schemas = set(self._schemas) - set(self._implementations)
        dangling_impls = set(self._implementations) - set(self._schemas)
        if dangling_schemas or dangling_impls:
            raise ValidationError(
                code="REGISTRY_MISMATCH",
                message="schemas and implementations differ",
                dangling_schemas=sorted(dangling_schemas),
                dangling_implementations=sorted(dangling_impls),
            )
        for name, implementation in self._implementations.items():
            if not callable(implementation):
                raise ValidationError(
                    code="INVALID_FUNCTION_IMPLEMENTATION",
                    message=f"Implementation of {name!r} is not callable",
                )

    def decode_arguments(self, name: str, raw: str) -> Dict[str, Any]:
        """解析并校验原始参数，只返回模型实际给出的字段。

        Raises:
            FunctionNotFound: 函数未注册。
            ArgumentDecodeError: 不是 JSON 对象、缺少必填字段或类型无法转换。
        """

        if name not in self._models:
            raise FunctionNotFound(name)
        try:
            payload = json.loads(raw) if raw and raw.strip() else {}
        except json.JSONDecodeError as e:
            raise ArgumentDecodeError(name, f"not valid JSON ({e})") from e
        if not isinstance(payload, dict):
            raise ArgumentDecodeError(name, "arguments must be a JSON object")
        try:
            parsed = self._models[name].model_validate(payload)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ArgumentDecodeError(name, problems) from e
        return parsed.model_dump(by_alias=True, exclude_unset=True)

    async def invoke(self, call: FunctionCall) -> str:
        """执行一次函数调用，返回字符串结果。"""

        implementation = self.lookup(call.name)
        kwargs = self.decode_arguments(call.name, call.arguments)
        logger.info("function.invoke", extra={"extra": {"function": call.name, "arguments": kwargs}})
        try:
            result = implementation(**kwargs)
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, str):
                return result
            return json.dumps(result, ensure_ascii=False)
        except Exception as exc:  # noqa: BLE001 - 需要把异常转换为函数错误
            raise FunctionExecutionError(call.name, str(exc)) from exc

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)
