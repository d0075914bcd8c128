"""工具数据结构定义。

这些 dataclass 描述了工具服务器及其暴露的工具：
- ToolServerConfig: 配置中声明的一个工具服务器。
- ToolDescriptor: 服务器 tools/list 返回的一个工具。
- ServerStatus: get_server_status 的单条结果。
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from vault_assistant.domain.exceptions import ConfigError
from vault_assistant.infrastructure.logging.logger import logger

FileOperation = Literal["read", "write", "list"]

# 每种文件操作对应的规范工具名
FILE_OPERATION_TOOLS: Dict[str, str] = {
    "read": "filesystem_read",
    "write": "filesystem_write",
    "list": "directory_list",
}

# 可作为通用替代的文件系统服务器名，按顺序查找
FILESYSTEM_SERVER_NAMES = ("filesystem", "filesystem-server")


@dataclass
class ToolServerConfig:
    name: str
    command: str = ""
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None


@dataclass
class ToolDescriptor:
    name: str
    description: str
    input_schema: Dict[str, Any]
    server: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], server: str) -> "ToolDescriptor":
        schema = payload.get("inputSchema") or payload.get("input_schema") or {}
        return cls(
            name=str(payload["name"]),
            description=str(payload.get("description") or ""),
            input_schema=schema if isinstance(schema, dict) else {},
            server=server,
        )


@dataclass
class ServerStatus:
    name: str
    connected: bool
    tool_count: int


def parse_server_configs(raw: Optional[str]) -> List[ToolServerConfig]:
    """解析工具服务器 JSON 配置。

    JSON 不合法或结构不对时记录 ConfigError 并返回空列表，不中断初始化。
    单个条目缺少 name 时只跳过该条目。
    """

    try:
        data = json.loads(raw or "[]")
    except json.JSONDecodeError as exc:
        _log_config_error(ConfigError(code="INVALID_MCP_SERVERS", message=str(exc)))
        return []
    if not isinstance(data, list):
        _log_config_error(ConfigError(code="INVALID_MCP_SERVERS", message="server list must be a JSON array"))
        return []

    configs: List[ToolServerConfig] = []
    seen: set[str] = set()
    for item in data:
        if not isinstance(item, dict) or not item.get("name"):
            logger.warning("Skipping tool server entry without name", extra={"extra": {"entry": item}})
            continue
        name = str(item["name"])
        if name in seen:
            continue
        seen.add(name)
        args = item.get("args") or []
        env = item.get("env") or {}
        configs.append(
            ToolServerConfig(
                name=name,
                command=str(item.get("command") or ""),
                args=[str(a) for a in args] if isinstance(args, list) else [],
                env={str(k): str(v) for k, v in env.items()} if isinstance(env, dict) else {},
                url=item.get("url") or None,
            )
        )
    return configs


def _log_config_error(err: ConfigError) -> None:
    logger.warning("Invalid tool server configuration", extra={"extra": {"code": err.code, "error": err.message}})
