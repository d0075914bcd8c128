"""自定义端点 Provider：OpenAI 兼容的请求/响应格式，地址来自配置，API 密钥可选。"""

from vault_assistant.domain.exceptions import ConfigError
from vault_assistant.domain.models import ChatRequest, ChatResult
from vault_assistant.providers.openai_client import OpenAIClient


class CustomEndpointClient(OpenAIClient):
    name = "custom"

    async def send(self, req: ChatRequest) -> ChatResult:
        url = self._endpoint()
        data = await self._post_json(
            url,
            self._build_payload(req, req.model),
            self._headers(getattr(self._settings, "api_key", "")),
        )
        return ChatResult(provider=self.name, model=req.model, content=self._parse_reply(data), raw=data)

    def _endpoint(self) -> str:
        url = (getattr(self._settings, "custom_api_url", "") or "").strip()
        if not url:
            raise ConfigError(code="MISSING_CUSTOM_URL", message="Please configure the custom API URL in the settings.")
        return url
