"""Provider 路由。

每次 route 都是独立的单发请求：Building（组装 ChatRequest）→ Sending（交给对应客户端）
→ Succeeded / Failed。路由器本身不持有跨调用状态，也不重试。
"""

import logging
import time
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from vault_assistant.domain.conversation import ConversationTurn
from vault_assistant.domain.exceptions import BusinessError, ConfigError
from vault_assistant.domain.models import ChatMessage, ChatRequest, ChatResult
from vault_assistant.infrastructure.logging.logger import log_event
from vault_assistant.providers.anthropic_client import AnthropicClient
from vault_assistant.providers.base import ProviderClient
from vault_assistant.providers.custom_client import CustomEndpointClient
from vault_assistant.providers.local_client import LocalExecutableClient
from vault_assistant.providers.openai_client import OpenAIClient
from vault_assistant.skills.models import Skill

DEFAULT_HISTORY_WINDOW = 10

ClientFactory = Callable[[object], ProviderClient]

PROVIDER_CLIENTS: Mapping[str, ClientFactory] = {
    "local": LocalExecutableClient,
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
    "custom": CustomEndpointClient,
}


def build_request(
    provider: str,
    message: str,
    context: str,
    history: Sequence[ConversationTurn],
    settings,
    skill: Optional[Skill] = None,
) -> ChatRequest:
    """组装发往 Provider 的请求。

    消息顺序：上下文注入消息（system）→ 最近 N 轮历史 → 当前用户消息；
    匹配到的技能指令追加在主系统提示词之后。
    """

    system_prompt = getattr(settings, "system_prompt", "") or ""
    if skill is not None:
        system_prompt = f"{system_prompt}\n\n[Skill: {skill.name}]\n{skill.instructions}".strip()

    window = getattr(settings, "history_window", DEFAULT_HISTORY_WINDOW)
    recent = list(history)[-window:] if window > 0 else []

    messages: List[ChatMessage] = []
    if context:
        messages.append(ChatMessage(role="system", content=f"Current vault context: {context}"))
    messages.extend(ChatMessage(role=turn.role, content=turn.content) for turn in recent)
    messages.append(ChatMessage(role="user", content=message))

    return ChatRequest(
        provider=provider,
        model=getattr(settings, "model", "") or "",
        system_prompt=system_prompt,
        messages=messages,
        prompt=message,
        max_tokens=getattr(settings, "max_tokens", 4096),
        temperature=getattr(settings, "temperature", 0.7),
    )


class ProviderRouter:
    def __init__(self, clients: Optional[Dict[str, ClientFactory]] = None) -> None:
        self._clients: Dict[str, ClientFactory] = dict(clients or PROVIDER_CLIENTS)

    def client_for(self, provider: str, settings) -> ProviderClient:
        factory = self._clients.get((provider or "").lower())
        if factory is None:
            raise ConfigError(code="UNKNOWN_PROVIDER", message=f"Unknown provider: {provider!r}")
        return factory(settings)

    async def route(
        self,
        provider: str,
        message: str,
        context: str,
        history: Sequence[ConversationTurn],
        settings,
        skill: Optional[Skill] = None,
        log_ctx: Optional[Dict[str, object]] = None,
    ) -> ChatResult:
        ctx = dict(log_ctx or {})
        ctx["provider"] = provider
        start_time = time.time()

        client = self.client_for(provider, settings)
        req = build_request(provider, message, context, history, settings, skill)
        log_event(
            logging.INFO,
            "Calling provider",
            ctx,
            model=req.model,
            message_count=len(req.messages),
            skill=skill.name if skill else None,
        )
        try:
            result = await client.send(req)
        except BusinessError as exc:
            log_event(
                logging.ERROR,
                "Provider call failed",
                ctx,
                code=exc.code,
                http_status=exc.http_status,
                elapsed_seconds=round(time.time() - start_time, 2),
            )
            raise
        log_event(
            logging.INFO,
            "Provider call succeeded",
            ctx,
            model=result.model,
            elapsed_seconds=round(time.time() - start_time, 2),
        )
        return result
