"""终端聊天界面。

逐行读取输入并提交给 Orchestrator；输入 /quit 或 EOF 结束。
读取输入放在线程里执行，不阻塞事件循环。
"""

import asyncio
import sys
from typing import Optional, TextIO

from chat_core.agents.orchestrator import ConversationOrchestrator
from chat_core.functions import default_registry
from chat_core.presentation.sinks import ConsoleSink
from chat_core.providers import create_gateway


QUIT_COMMANDS = {"/quit", "/exit"}


async def run_console(
    orchestrator: ConversationOrchestrator,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> None:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    while True:
        stdout.write("> ")
        stdout.flush()
        line = await asyncio.to_thread(stdin.readline)
        if not line:
            break
        text = line.rstrip("\n")
        if text.strip() in QUIT_COMMANDS:
            break
        await orchestrator.submit_user_text(text)


def main() -> None:
    sink = ConsoleSink(sys.stdout)
    orchestrator = ConversationOrchestrator(create_gateway(), default_registry(), sink=sink)
    try:
        asyncio.run(run_console(orchestrator))
    except KeyboardInterrupt:
        pass
