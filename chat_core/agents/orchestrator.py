"""会话编排核心模块。

ConversationOrchestrator 持有会话日志，对每条模型回复决定是展示文本，
还是执行本地函数并带着结果再次调用 Gateway。

状态流转：
    IDLE --submit_user_text--> AWAITING_MODEL_REPLY
    AWAITING_MODEL_REPLY --文本--> IDLE
    AWAITING_MODEL_REPLY --函数调用--> AWAITING_FUNCTION_RESULT
    AWAITING_FUNCTION_RESULT --结果--> AWAITING_MODEL_REPLY

任何 BusinessError 都只终止当前这一轮：状态回到 IDLE，已追加的消息保留。
"""

import asyncio
import logging
import string
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from chat_core.config.settings import settings
from chat_core.domain.conversation import Conversation
from chat_core.domain.exceptions import BusinessError, TurnInProgressError, ValidationError
from chat_core.domain.models import DisplayEvent, FunctionCall, Message, ModelReply
from chat_core.functions.registry import FunctionRegistry
from chat_core.infrastructure.logging.logger import logger
from chat_core.presentation.sinks import DisplaySink
from chat_core.providers.base import ModelGateway


_DISPLAY_TRIM = string.whitespace + '"'

SUBMIT_POLICIES = ("queue", "reject")


class OrchestratorState(str, Enum):
    IDLE = "idle"
    AWAITING_MODEL_REPLY = "awaiting_model_reply"
    AWAITING_FUNCTION_RESULT = "awaiting_function_result"


@dataclass
class TurnResult:
    """一轮对话产生的展示事件，以及导致提前结束的错误（如有）。"""

    events: List[DisplayEvent] = field(default_factory=list)
    error: Optional[BusinessError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ConversationOrchestrator:
    def __init__(
        self,
        gateway: ModelGateway,
        registry: FunctionRegistry,
        sink: Optional[DisplaySink] = None,
        max_function_hops: Optional[int] = None,
        concurrent_submit: Optional[str] = None,
        cfg=settings,
    ):
        self._gateway = gateway
        self._registry = registry
        self._sink = sink
        if max_function_hops is None:
            max_function_hops = getattr(cfg, "max_function_hops", 1)
        if concurrent_submit is None:
            concurrent_submit = getattr(cfg, "concurrent_submit", "queue")
        if max_function_hops < 0:
            raise ValidationError(
                code="INVALID_MAX_FUNCTION_HOPS",
                message=f"max_function_hops must be >= 0, got {max_function_hops}",
            )
        if concurrent_submit not in SUBMIT_POLICIES:
            raise ValidationError(
                code="INVALID_CONCURRENT_SUBMIT",
                message=f"concurrent_submit must be one of {SUBMIT_POLICIES}, got {concurrent_submit!r}",
            )
        self._max_function_hops = max_function_hops
        self._concurrent_submit = concurrent_submit
        self._conversation = Conversation()
        self._state = OrchestratorState.IDLE
        self._lock = asyncio.Lock()

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self._conversation.snapshot()

    async def submit_user_text(self, text: str) -> TurnResult:
        """提交一条用户输入并运行完整的一轮。

        空白输入直接忽略。错误不会抛出，而是写入 TurnResult.error 并通知 sink。
        """

        if not text or not text.strip():
            return TurnResult()
        if self._concurrent_submit == "reject" and self._lock.locked():
            result = TurnResult(error=TurnInProgressError())
            self._log(logging.WARNING, "Rejected submission", {}, code=result.error.code)
            self._report_error(result.error)
            return result
        async with self._lock:
            return await self._run_turn(text)

    async def _run_turn(self, text: str) -> TurnResult:
        start_time = time.time()
        log_ctx: Dict[str, Any] = {"turn_id": f"turn-{uuid4().hex}"}
        result = TurnResult()

        self._conversation.append(Message.user(text))
        self._emit(result, DisplayEvent(text=text, origin="user"))
        self._log(logging.INFO, "Stored user message", log_ctx, message_count=len(self._conversation))

        hops = 0
        try:
            self._state = OrchestratorState.AWAITING_MODEL_REPLY
            reply = await self._complete(log_ctx)
            while reply.is_function_call:
                call = reply.function_call
                if hops >= self._max_function_hops:
                    self._log(
                        logging.WARNING,
                        "Function call limit reached",
                        log_ctx,
                        function=call.name,
                        max_function_hops=self._max_function_hops,
                    )
                    self._emit(
                        result,
                        DisplayEvent(
                            id=reply.id,
                            text=f"Skipped function {call.name}: function call limit reached",
                            origin="model",
                        ),
                    )
                    break
                hops += 1
                reply = await self._dispatch(reply, call, result, log_ctx)
            else:
                self._conversation.append(Message.assistant(reply.text))
                self._emit(result, DisplayEvent(id=reply.id, text=self._display_text(reply.text), origin="model"))
                self._log(logging.INFO, "Stored assistant message", log_ctx, response_id=reply.id)
        except BusinessError as exc:
            result.error = exc
            self._log(
                logging.ERROR,
                "Turn failed",
                log_ctx,
                code=exc.code,
                error=exc.message,
                state=self._state.value,
            )
            self._report_error(exc)
        finally:
            self._state = OrchestratorState.IDLE

        self._log(
            logging.INFO,
            "Completed turn",
            log_ctx,
            elapsed_seconds=round(time.time() - start_time, 2),
            function_hops=hops,
            ok=result.ok,
        )
        return result

    async def _dispatch(
        self,
        reply: ModelReply,
        call: FunctionCall,
        result: TurnResult,
        log_ctx: Dict[str, Any],
    ) -> ModelReply:
        """执行模型请求的函数，并带着结果再次调用 Gateway。"""

        self._conversation.append(Message.function_request(call))
        self._emit(result, DisplayEvent(id=reply.id, text=f"Calling function {call.name}", origin="model"))
        self._state = OrchestratorState.AWAITING_FUNCTION_RESULT
        self._log(logging.INFO, "Dispatching function call", log_ctx, function=call.name)

        output = await self._registry.invoke(call)

        self._conversation.append(Message.function_result(call.name, output))
        self._log(logging.INFO, "Stored function result", log_ctx, function=call.name, result_chars=len(output))
        self._state = OrchestratorState.AWAITING_MODEL_REPLY
        return await self._complete(log_ctx)

    async def _complete(self, log_ctx: Dict[str, Any]) -> ModelReply:
        self._log(
            logging.INFO,
            "Calling gateway",
            log_ctx,
            gateway=getattr(self._gateway, "name", "unknown"),
            message_count=len(self._conversation),
        )
        reply = await self._gateway.complete(self._conversation.snapshot(), self._registry.schemas())
        self._log(
            logging.INFO,
            "Gateway replied",
            log_ctx,
            response_id=reply.id,
            function_call=reply.function_call.name if reply.function_call else None,
            finish_reason=reply.finish_reason,
        )
        return reply

    def _emit(self, result: TurnResult, event: DisplayEvent) -> None:
        result.events.append(event)
        if self._sink is not None:
            self._sink.on_event(event)

    def _report_error(self, error: BusinessError) -> None:
        if self._sink is not None:
            self._sink.on_error(error)

    @staticmethod
    def _display_text(text: Optional[str]) -> str:
        return (text or "").strip(_DISPLAY_TRIM)

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
