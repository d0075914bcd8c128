"""Vault Assistant 顶层包。

该包提供笔记应用内 AI 助手的编排核心：
Provider 路由与响应归一化、技能(skill)触发匹配、
上下文组装、工具服务器桥接及其本地降级链路，
以及把这些能力串起来的会话与服务层。
"""

from vault_assistant.api.service import AssistantService, create_default_service

__all__ = ["AssistantService", "create_default_service"]
