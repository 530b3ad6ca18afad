"""会话日志。

Conversation 是按时间顺序追加的 Message 序列，每次调用 Gateway 都会完整发送。
只有 Orchestrator 可以调用 append；其它读者通过 snapshot() 或 subscribe() 获取数据。
"""

from typing import Callable, Iterator, List, Tuple

from .models import Message


AppendListener = Callable[[Message], None]


class Conversation:
    def __init__(self) -> None:
        self._messages: List[Message] = []
        self._listeners: List[AppendListener] = []

    def append(self, message: Message) -> None:
        self._messages.append(message)
        for listener in list(self._listeners):
            listener(message)

    def snapshot(self) -> Tuple[Message, ...]:
        """返回当前日志的不可变快照。"""

        return tuple(self._messages)

    def subscribe(self, listener: AppendListener) -> Callable[[], None]:
        """注册追加通知，返回取消订阅的函数。"""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())
