"""HTTP Provider 端点配置。

集中维护各厂商的固定端点与默认模型，模型配置为空时使用这里的默认值。
custom Provider 的地址来自配置，不在此登记。
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class ProviderConfig:
    """某个 HTTP Provider 的固定配置。"""

    name: str
    endpoint: str
    default_model: str
    extra_headers: Dict[str, str]


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    endpoint="https://api.openai.com/v1/chat/completions",
    default_model="gpt-4",
    extra_headers={},
)

ANTHROPIC_CONFIG = ProviderConfig(
    name="anthropic",
    endpoint="https://api.anthropic.com/v1/messages",
    default_model="claude-3-sonnet-20240229",
    extra_headers={"anthropic-version": "2023-06-01"},
)
