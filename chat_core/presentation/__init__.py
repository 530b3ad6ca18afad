"""展示层：DisplaySink 协议与终端实现。"""

from chat_core.presentation.sinks import CollectingSink, ConsoleSink, DisplaySink

__all__ = ["CollectingSink", "ConsoleSink", "DisplaySink"]
