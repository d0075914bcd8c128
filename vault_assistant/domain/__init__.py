"""领域层模型与协议。

包含：
- models: 统一的 ChatMessage / ChatRequest / ChatResult 模型。
- conversation: 会话轮次 ConversationTurn。
- workspace: 宿主笔记库存储的协议与数据结构。
- exceptions: 业务异常类型定义。
"""
