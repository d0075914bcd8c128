"""对外服务模块。

AssistantService 是宿主应用与核心之间的唯一接缝：宿主注入配置与存储，
在插件加载时调用 start()，卸载时调用 stop()；核心不访问任何全局应用对象。
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from vault_assistant.agents.session import ConversationSession
from vault_assistant.config.settings import AssistantSettings
from vault_assistant.context.assembler import ContextAssembler
from vault_assistant.domain.workspace import WorkspaceStore
from vault_assistant.infrastructure.logging.logger import logger
from vault_assistant.infrastructure.storage.workspace_store import LocalWorkspaceStore
from vault_assistant.providers.router import ProviderRouter
from vault_assistant.skills.registry import SkillRegistry
from vault_assistant.tools.bridge import ToolBridge
from vault_assistant.tools.definitions import FileOperation, parse_server_configs


class AssistantService:
    def __init__(
        self,
        settings: AssistantSettings,
        store: WorkspaceStore,
        router: Optional[ProviderRouter] = None,
        tool_bridge: Optional[ToolBridge] = None,
    ):
        self.settings = settings
        self.store = store
        self.skills = SkillRegistry()
        self.tools = tool_bridge or ToolBridge.from_settings(store, settings)
        self.session = ConversationSession(
            router=router or ProviderRouter(),
            assembler=ContextAssembler(
                store,
                max_chars=settings.context_max_chars,
                max_files=settings.context_max_files,
            ),
            settings=settings,
            skills=self.skills,
        )

    # ---- 生命周期 ------------------------------------------------

    async def start(self) -> None:
        self.reload_skills()
        if self.settings.enable_mcp:
            await self.connect_tools()

    async def stop(self) -> None:
        await self.tools.disconnect()
        self.session.clear()

    def reload_skills(self) -> int:
        """技能目录变更后重新加载。"""
        return self.skills.load_from_store(self.store, self.settings.skills_dir)

    async def connect_tools(self) -> None:
        servers = parse_server_configs(self.settings.mcp_servers)
        await self.tools.connect(servers)

    async def set_mcp_enabled(self, enabled: bool) -> None:
        self.settings.enable_mcp = enabled
        if enabled:
            await self.connect_tools()
        else:
            await self.tools.disconnect()

    # ---- 对话 ----------------------------------------------------

    async def chat(self, user_input: str) -> Optional[Dict[str, Any]]:
        """发送一条消息。

        Returns:
            包含用户消息与助手消息的字典；消息为空或会话忙碌时返回 None。
        """
        assistant_turn = await self.session.submit(user_input)
        if assistant_turn is None:
            return None
        history = self.session.history
        user_turns = [t for t in history[:-1] if t.role == "user"]
        return {
            "user_message": user_turns[-1].to_dict() if user_turns else None,
            "assistant_message": assistant_turn.to_dict(),
            "turns": len(history),
        }

    def clear(self) -> None:
        self.session.clear()

    def history(self) -> List[Dict[str, Any]]:
        return [turn.to_dict() for turn in self.session.history]

    # ---- 工具 ----------------------------------------------------

    async def execute_file_operation(self, operation: FileOperation, path: str, content: Optional[str] = None) -> str:
        return await self.tools.execute_file_operation(operation, path, content)

    def server_status(self) -> List[Dict[str, Any]]:
        return [
            {"name": s.name, "connected": s.connected, "tools": s.tool_count}
            for s in self.tools.get_server_status()
        ]


def create_default_service(workspace_root: Optional[str] = None, **overrides: Any) -> AssistantService:
    """以本地文件系统为存储创建服务实例。"""

    if workspace_root:
        overrides["workspace_root"] = workspace_root
    cfg = AssistantSettings(**overrides)
    store = LocalWorkspaceStore(root=Path(cfg.workspace_root))
    logger.info("Created assistant service", extra={"extra": {"workspace_root": cfg.workspace_root, "provider": cfg.provider}})
    return AssistantService(settings=cfg, store=store)
