"""领域层模型与协议。

包含：
- models: Message / FunctionCall / ModelReply / DisplayEvent。
- conversation: 只追加的会话日志 Conversation。
- exceptions: 业务异常类型定义。
"""
