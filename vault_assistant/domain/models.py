"""统一的对话请求与结果数据模型。

各 Provider 适配器（OpenAI、Anthropic、custom、local）都只依赖这些模型，
并负责在各自的请求/响应格式和这些模型之间做转换。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional


# 对话角色（与 OpenAI 等厂商的 role 字段对应）
Role = Literal["system", "user", "assistant"]


@dataclass
class ChatMessage:
    """发往 Provider 的一条消息。"""

    role: Role
    content: str


@dataclass
class ChatRequest:
    """一次完整的聊天请求。

    - system_prompt: 主系统提示词（已合并技能指令），由各 Provider 决定放置位置。
    - messages: 上下文消息 + 历史窗口 + 当前用户消息，顺序即发送顺序。
    - prompt: 当前用户消息原文，local Provider 只使用这一项。
    """

    provider: str
    model: str
    system_prompt: str
    messages: List[ChatMessage]
    prompt: str
    max_tokens: int = 4096
    temperature: float = 0.7


@dataclass
class ChatResult:
    """一次对话调用归一化后的结果。

    - content: 回复文本（解析失败时为占位文本）。
    - raw: 原始响应 JSON，用于调试或日志记录；local Provider 为 None。
    """

    provider: str
    model: str
    content: str
    raw: Optional[Dict[str, Any]] = None
    meta: Dict[str, Any] = field(default_factory=dict)
