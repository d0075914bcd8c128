"""ToolBridge：工具目录维护、工具调用与文件操作降级链。

文件操作按三级顺序解析：
1. 目录中存在规范名工具（filesystem_read / filesystem_write / directory_list）；
2. 名为 filesystem / filesystem-server 的服务器下的第一个工具；
3. 直接操作宿主存储。

只有上一级“不可用”（没有对应描述符）才进入下一级；已选中的工具调用失败时
错误直接向上抛出，不会继续降级。
"""

import asyncio
import json
import os
from typing import Any, Awaitable, Callable, Dict, List, Optional

from vault_assistant.domain.exceptions import BusinessError, NotFoundError
from vault_assistant.domain.workspace import WorkspaceStore
from vault_assistant.infrastructure.logging.logger import logger
from vault_assistant.tools.definitions import (
    FILE_OPERATION_TOOLS,
    FILESYSTEM_SERVER_NAMES,
    FileOperation,
    ServerStatus,
    ToolDescriptor,
    ToolServerConfig,
)
from vault_assistant.tools.transport import JsonRpcTransport

DEFAULT_TOOL_SERVER_URL = "http://localhost:3000"

FileAction = Callable[[], Awaitable[str]]
Resolver = Callable[[FileOperation, str, Optional[str]], Optional[FileAction]]


class ToolBridge:
    def __init__(
        self,
        store: WorkspaceStore,
        transport: Optional[JsonRpcTransport] = None,
        default_url: str = DEFAULT_TOOL_SERVER_URL,
        spawn_servers: bool = False,
        workspace_root: Optional[str] = None,
    ) -> None:
        self._store = store
        self._transport = transport or JsonRpcTransport()
        self._default_url = default_url
        self._spawn_servers = spawn_servers
        self._workspace_root = workspace_root
        self._servers: List[ToolServerConfig] = []
        self._catalog: Dict[str, List[ToolDescriptor]] = {}
        self._processes: Dict[str, asyncio.subprocess.Process] = {}
        self._resolvers: List[Resolver] = [
            self._resolve_exact_tool,
            self._resolve_filesystem_server_tool,
            self._resolve_local_store,
        ]

    @classmethod
    def from_settings(cls, store: WorkspaceStore, cfg) -> "ToolBridge":
        return cls(
            store=store,
            transport=JsonRpcTransport(timeout=getattr(cfg, "tool_timeout", 10.0)),
            default_url=getattr(cfg, "tool_server_url", DEFAULT_TOOL_SERVER_URL),
            spawn_servers=getattr(cfg, "spawn_tool_servers", False),
            workspace_root=getattr(cfg, "workspace_root", None),
        )

    # ---- 连接 ----------------------------------------------------

    async def connect(self, servers: List[ToolServerConfig]) -> None:
        """为每个服务器请求一次工具目录，失败的服务器记为空目录。"""

        self._servers = list(servers)
        if self._spawn_servers:
            for server in self._servers:
                await self._spawn(server)
        results = await asyncio.gather(*(self._list_server_tools(s) for s in self._servers))
        # 整体替换，不做增量更新
        self._catalog = {server.name: tools for server, tools in zip(self._servers, results)}
        logger.info(
            "Connected tool servers",
            extra={"extra": {"servers": len(self._servers), "tools": sum(len(t) for t in results)}},
        )

    async def _list_server_tools(self, server: ToolServerConfig) -> List[ToolDescriptor]:
        try:
            return await self._transport.list_tools(self._url_for(server), server.name)
        except BusinessError as exc:
            logger.warning(
                "Tool server listing failed",
                extra={"extra": {"server": server.name, "code": exc.code, "error": exc.message}},
            )
            return []

    async def _spawn(self, server: ToolServerConfig) -> None:
        if not server.command or server.name in self._processes:
            return
        try:
            proc = await asyncio.create_subprocess_exec(
                server.command,
                *server.args,
                cwd=self._workspace_root,
                env={**os.environ, **server.env},
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.warning("Failed to start tool server", extra={"extra": {"server": server.name, "error": str(exc)}})
            return
        self._processes[server.name] = proc

    async def disconnect(self) -> None:
        """终止自有子进程并清空目录；重复调用是空操作。"""

        if not self._processes and not self._catalog:
            return
        for name, proc in list(self._processes.items()):
            if proc.returncode is None:
                try:
                    proc.terminate()
                except ProcessLookupError:
                    pass
                await proc.wait()
            logger.info("Stopped tool server", extra={"extra": {"server": name}})
        self._processes.clear()
        self._catalog.clear()
        logger.info("Disconnected tool servers")

    def _url_for(self, server: ToolServerConfig) -> str:
        return server.url or self._default_url

    def _server_config(self, name: str) -> Optional[ToolServerConfig]:
        for server in self._servers:
            if server.name == name:
                return server
        return None

    # ---- 查询 ----------------------------------------------------

    @property
    def catalog(self) -> Dict[str, List[ToolDescriptor]]:
        return {name: list(tools) for name, tools in self._catalog.items()}

    def tools(self) -> List[ToolDescriptor]:
        all_tools: List[ToolDescriptor] = []
        for tools in self._catalog.values():
            all_tools.extend(tools)
        return all_tools

    def get_server_status(self) -> List[ServerStatus]:
        return [
            ServerStatus(
                name=server.name,
                connected=server.name in self._catalog,
                tool_count=len(self._catalog.get(server.name, [])),
            )
            for server in self._servers
        ]

    # ---- 调用 ----------------------------------------------------

    async def call_tool(self, server_name: str, tool_name: str, arguments: Dict[str, Any]) -> Any:
        server = self._server_config(server_name)
        url = self._url_for(server) if server else self._default_url
        try:
            return await self._transport.call_tool(url, server_name, tool_name, arguments)
        except BusinessError as exc:
            logger.error(
                "Tool call failed",
                extra={"extra": {"server": server_name, "tool": tool_name, "status": exc.http_status, "error": exc.message}},
            )
            raise

    async def execute_file_operation(self, operation: FileOperation, path: str, content: Optional[str] = None) -> str:
        if operation not in FILE_OPERATION_TOOLS:
            return "Unknown operation"
        for resolver in self._resolvers:
            action = resolver(operation, path, content)
            if action is not None:
                return await action()
        # 本地存储一级总是可用，正常不会到这里
        return "Unknown operation"

    @staticmethod
    def _tool_arguments(path: str, content: Optional[str]) -> Dict[str, Any]:
        args: Dict[str, Any] = {"path": path}
        if content is not None:
            args["content"] = content
        return args

    def _resolve_exact_tool(self, operation: FileOperation, path: str, content: Optional[str]) -> Optional[FileAction]:
        tool_name = FILE_OPERATION_TOOLS[operation]
        for server_name, tools in self._catalog.items():
            if any(t.name == tool_name for t in tools):
                return self._tool_action(server_name, tool_name, path, content)
        return None

    def _resolve_filesystem_server_tool(
        self, operation: FileOperation, path: str, content: Optional[str]
    ) -> Optional[FileAction]:
        for server_name in FILESYSTEM_SERVER_NAMES:
            tools = self._catalog.get(server_name)
            if tools:
                return self._tool_action(server_name, tools[0].name, path, content)
        return None

    def _tool_action(self, server_name: str, tool_name: str, path: str, content: Optional[str]) -> FileAction:
        async def _run() -> str:
            logger.info("File operation via tool server", extra={"extra": {"server": server_name, "tool": tool_name}})
            result = await self.call_tool(server_name, tool_name, self._tool_arguments(path, content))
            return json.dumps(result, ensure_ascii=False)

        return _run

    def _resolve_local_store(self, operation: FileOperation, path: str, content: Optional[str]) -> Optional[FileAction]:
        async def _run() -> str:
            logger.info("File operation via local store", extra={"extra": {"operation": operation, "path": path}})
            if operation == "read":
                try:
                    return self._store.read_file(path)
                except NotFoundError:
                    return "File not found"
            if operation == "write":
                self._store.write_file(path, content or "")
                return "File written"
            entries = self._store.list_files(path)
            return json.dumps([{"name": e.name, "path": e.path} for e in entries], ensure_ascii=False)

        return _run
