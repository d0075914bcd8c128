"""Anthropic Provider 适配器。

Messages API 不允许消息列表中出现 system 角色：
- 主系统提示词放在顶层 system 字段；
- 列表中其余 system 消息（如上下文注入）一律改写为 user。
回复位于 content[0].text。
"""

from typing import Any, Dict, Optional

from vault_assistant.domain.exceptions import ConfigError
from vault_assistant.domain.models import ChatRequest, ChatResult
from vault_assistant.providers.base import NO_RESPONSE, HttpChatClient
from vault_assistant.providers.registry import ANTHROPIC_CONFIG


class AnthropicClient(HttpChatClient):
    name = "anthropic"

    async def send(self, req: ChatRequest) -> ChatResult:
        api_key = getattr(self._settings, "api_key", "")
        if not api_key:
            raise ConfigError(code="MISSING_API_KEY", message="Please configure your API key in the settings.")
        model = req.model or ANTHROPIC_CONFIG.default_model
        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            **ANTHROPIC_CONFIG.extra_headers,
        }
        data = await self._post_json(ANTHROPIC_CONFIG.endpoint, self._build_payload(req, model), headers)
        return ChatResult(provider=self.name, model=model, content=self._parse_reply(data), raw=data)

    @staticmethod
    def _build_payload(req: ChatRequest, model: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": model,
            "max_tokens": req.max_tokens,
            "temperature": req.temperature,
            "messages": [
                {"role": "user" if m.role == "system" else m.role, "content": m.content}
                for m in req.messages
            ],
        }
        if req.system_prompt:
            payload["system"] = req.system_prompt
        return payload

    @staticmethod
    def _parse_reply(data: Optional[Dict[str, Any]]) -> str:
        try:
            text = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return NO_RESPONSE
        return text if isinstance(text, str) and text else NO_RESPONSE
