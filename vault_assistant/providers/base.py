"""Provider 抽象接口。

路由层不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个 Provider 实现一个客户端（OpenAIClient、AnthropicClient、
  CustomEndpointClient、LocalExecutableClient）。
- 负责：将 ChatRequest 转成具体请求（HTTP 或子进程），并把结果归一化为 ChatResult。
"""

from typing import Any, Dict, Optional, Protocol

import httpx

from vault_assistant.domain.exceptions import ApiError, NetworkError, RateLimitError
from vault_assistant.domain.models import ChatRequest, ChatResult

# 响应中找不到回复字段时的占位文本
NO_RESPONSE = "No response"


class ProviderClient(Protocol):
    """Provider 客户端协议。

    - name: Provider 名称，用于日志。
    - send(req): 执行一次单发请求，返回 ChatResult；失败抛出 BusinessError 子类。
    """

    name: str

    async def send(self, req: ChatRequest) -> ChatResult:
        ...


class HttpChatClient:
    """HTTP 类 Provider 的公共发送逻辑：一次 POST，不重试。"""

    name = "http"

    def __init__(self, settings):
        # Settings 里包含 api_key、超时等配置
        self._settings = settings

    async def _post_json(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> Optional[Dict[str, Any]]:
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.post(url, json=payload, headers=headers)
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等
            raise NetworkError(code="NETWORK_ERROR", message=str(e), provider=self.name)
        if resp.status_code == 429:
            raise RateLimitError(
                code="RATE_LIMIT",
                message=f"API Error: 429 - {resp.text}",
                http_status=429,
                provider=self.name,
            )
        if resp.status_code >= 400:
            raise ApiError(
                code="API_ERROR",
                message=f"API Error: {resp.status_code} - {resp.text}",
                http_status=resp.status_code,
                provider=self.name,
            )
        try:
            data = resp.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None
