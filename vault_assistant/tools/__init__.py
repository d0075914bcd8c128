"""工具服务器集成层。

- definitions: ToolServerConfig / ToolDescriptor 等数据结构与配置解析。
- transport: JSON-RPC over HTTP 的 tools/list 与 tools/call。
- bridge: ToolBridge，维护工具目录并提供文件操作的三级降级链。
"""

from vault_assistant.tools.bridge import ToolBridge
from vault_assistant.tools.definitions import (
    ServerStatus,
    ToolDescriptor,
    ToolServerConfig,
    parse_server_configs,
)

__all__ = ["ToolBridge", "ServerStatus", "ToolDescriptor", "ToolServerConfig", "parse_server_configs"]
