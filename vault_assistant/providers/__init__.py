"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口与 HTTP 公共逻辑 (base)。
- 维护 HTTP Provider 的端点与默认模型 (registry)。
- 提供各 Provider 的具体实现（openai、anthropic、custom、local）。
- 按配置选择 Provider 并组装请求 (router)。
"""

from typing import Optional

from vault_assistant.config.settings import settings
from vault_assistant.providers.base import ProviderClient
from vault_assistant.providers.router import PROVIDER_CLIENTS, ProviderRouter, build_request
from vault_assistant.domain.exceptions import ConfigError


def create_provider(name: Optional[str] = None, cfg=None) -> ProviderClient:
    """根据名称创建 Provider 实例，默认取配置中的 provider。"""

    cfg = cfg or settings
    provider_name = (name or getattr(cfg, "provider", "local")).lower()
    factory = PROVIDER_CLIENTS.get(provider_name)
    if factory is None:
        raise ConfigError(code="UNKNOWN_PROVIDER", message=f"Unknown provider: {provider_name!r}")
    return factory(cfg)


__all__ = ["ProviderClient", "ProviderRouter", "build_request", "create_provider"]
