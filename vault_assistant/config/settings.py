"""配置管理模块。

支持从初始化参数、环境变量、.env 以及 config.yaml 加载配置。
宿主应用持久化这些配置，核心层只读取；各字段在使用点惰性校验。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SYSTEM_PROMPT = (
    "You are an AI assistant integrated into a note-taking app. "
    "You help users with their notes, code, and workflows. Be concise and helpful."
)


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("VAULT_ASSISTANT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class AssistantSettings(BaseSettings):
    """助手配置（使用 Pydantic）。"""

    # ---- Provider 相关配置 ----
    provider: str = Field(
        default="local",
        description="使用的 Provider：local、openai、anthropic、custom",
    )
    api_key: str = Field(default="", description="HTTP Provider 的 API 密钥")
    custom_api_url: str = Field(default="", description="custom Provider 的完整请求地址")
    model: str = Field(default="", description="模型 ID，留空时使用 Provider 默认模型")
    max_tokens: int = Field(default=4096, ge=1, description="单次回复最大 token 数")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="生成温度")
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, description="默认系统提示词")
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 本地可执行程序 ----
    local_command: str = Field(default="opencode", description="local Provider 调用的命令")
    local_args: List[str] = Field(default_factory=lambda: ["run"], description="位于提示词之前的命令参数")
    local_prompt_prefix: str = Field(default="", description="拼接在用户消息之前的固定前缀")
    local_timeout: float = Field(default=60.0, gt=0, description="本地命令的硬超时（秒）")
    local_max_output: int = Field(default=10 * 1024 * 1024, ge=1, description="本地命令输出上限（字节）")

    # ---- 会话与上下文 ----
    history_window: int = Field(default=10, ge=0, le=100, description="随请求发送的历史轮次数")
    context_max_chars: int = Field(default=2000, ge=0, description="当前文档摘录的最大字符数")
    context_max_files: int = Field(default=50, ge=0, description="上下文中列出的最大文件数")
    workspace_root: str = Field(
        default_factory=lambda: str(Path.cwd()),
        description="笔记库（vault）根目录",
    )

    # ---- 技能与工具服务器 ----
    skills_dir: str = Field(default=".vault-assistant/skills", description="技能定义所在目录（相对 vault）")
    enable_mcp: bool = Field(default=False, description="是否启用工具服务器集成")
    mcp_servers: str = Field(default="[]", description="工具服务器配置（JSON 文本）")
    tool_server_url: str = Field(default="http://localhost:3000", description="工具服务器默认地址")
    tool_timeout: float = Field(default=10.0, ge=0.1, description="工具服务器请求超时（秒）")
    spawn_tool_servers: bool = Field(default=False, description="连接前是否启动配置中的服务器命令")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_prefix="VAULT_ASSISTANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        # 未知值在路由时才报错
        return (v or "").strip().lower()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = AssistantSettings()
