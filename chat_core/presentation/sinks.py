"""展示层边界。

Orchestrator 只通过 DisplaySink 把结果交出去：on_event 收到按顺序追加的
DisplayEvent，on_error 收到本轮失败的原因。具体的窗口/终端渲染都在这一侧。
"""

from dataclasses import dataclass, field
from typing import List, Protocol, TextIO

from chat_core.domain.exceptions import BusinessError
from chat_core.domain.models import DisplayEvent


class DisplaySink(Protocol):
    def on_event(self, event: DisplayEvent) -> None:
        ...

    def on_error(self, error: BusinessError) -> None:
        ...


@dataclass
class CollectingSink:
    """把事件和错误收集到内存列表里。"""

    events: List[DisplayEvent] = field(default_factory=list)
    errors: List[BusinessError] = field(default_factory=list)

    def on_event(self, event: DisplayEvent) -> None:
        self.events.append(event)

    def on_error(self, error: BusinessError) -> None:
        self.errors.append(error)


class ConsoleSink:
    """按 "[HH:MM:SS] you: ..." 的格式输出到终端。"""

    labels = {"user": "you", "model": "model"}

    def __init__(self, out: TextIO, echo_user: bool = False):
        self._out = out
        # 终端里用户输入已经可见，默认不再回显
        self._echo_user = echo_user

    def on_event(self, event: DisplayEvent) -> None:
        if event.origin == "user" and not self._echo_user:
            return
        stamp = event.timestamp.astimezone().strftime("%H:%M:%S")
        self._out.write(f"[{stamp}] {self.labels[event.origin]}: {event.text}\n")
        self._out.flush()

    def on_error(self, error: BusinessError) -> None:
        self._out.write(f"[error] {error.code}: {error.message}\n")
        self._out.flush()
