"""OpenAI Provider 适配器。

请求体：{model, messages, max_tokens, temperature}，系统提示词作为首条 system 消息；
回复位于 choices[0].message.content。
"""

from typing import Any, Dict, List, Optional

from vault_assistant.domain.exceptions import ConfigError
from vault_assistant.domain.models import ChatRequest, ChatResult
from vault_assistant.providers.base import NO_RESPONSE, HttpChatClient
from vault_assistant.providers.registry import OPENAI_CONFIG


class OpenAIClient(HttpChatClient):
    name = "openai"

    async def send(self, req: ChatRequest) -> ChatResult:
        api_key = getattr(self._settings, "api_key", "")
        if not api_key:
            raise ConfigError(code="MISSING_API_KEY", message="Please configure your API key in the settings.")
        url = self._endpoint()
        model = req.model or OPENAI_CONFIG.default_model
        data = await self._post_json(url, self._build_payload(req, model), self._headers(api_key))
        return ChatResult(provider=self.name, model=model, content=self._parse_reply(data), raw=data)

    def _endpoint(self) -> str:
        return OPENAI_CONFIG.endpoint

    @staticmethod
    def _headers(api_key: Optional[str]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    @staticmethod
    def _build_payload(req: ChatRequest, model: str) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = []
        if req.system_prompt:
            messages.append({"role": "system", "content": req.system_prompt})
        messages.extend({"role": m.role, "content": m.content} for m in req.messages)
        return {
            "model": model,
            "messages": messages,
            "max_tokens": req.max_tokens,
            "temperature": req.temperature,
        }

    @staticmethod
    def _parse_reply(data: Optional[Dict[str, Any]]) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return NO_RESPONSE
        return content if isinstance(content, str) and content else NO_RESPONSE
