"""会话引擎。

持有当前会话的有序轮次，并串起一次提交的完整生命周期：
追加用户轮次 → 匹配技能 → 组装上下文 → 路由到 Provider → 追加助手轮次。
Provider 失败会被转换成带 "Error:" 前缀的助手轮次，而不是抛给调用方。
"""

import logging
import time
from typing import List, Optional, Tuple
from uuid import uuid4

from vault_assistant.context.assembler import ContextAssembler
from vault_assistant.domain.conversation import ConversationTurn
from vault_assistant.domain.exceptions import BusinessError
from vault_assistant.infrastructure.logging.logger import log_event
from vault_assistant.providers.router import ProviderRouter
from vault_assistant.skills.registry import SkillRegistry


class ConversationSession:
    def __init__(
        self,
        router: ProviderRouter,
        assembler: ContextAssembler,
        settings,
        skills: Optional[SkillRegistry] = None,
    ):
        self._router = router
        self._assembler = assembler
        self._settings = settings
        self._skills = skills
        self._turns: List[ConversationTurn] = []
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def history(self) -> Tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def clear(self) -> None:
        """清空历史；不影响技能注册表与工具桥。"""
        self._turns.clear()

    async def submit(self, user_message: str) -> Optional[ConversationTurn]:
        """提交一条用户消息并返回助手轮次。

        消息为空或上一次提交尚未完成时直接忽略（返回 None），不排队。
        """

        message = (user_message or "").strip()
        if not message or self._busy:
            return None
        # 忙碌标记必须在第一个 await 之前设置
        self._busy = True
        start_time = time.time()
        log_ctx = {"trace_id": f"tr-{uuid4().hex}"}
        try:
            prior = list(self._turns)
            self._turns.append(ConversationTurn(role="user", content=message))
            reply = await self._respond(message, prior, log_ctx)
            assistant_turn = ConversationTurn(role="assistant", content=reply)
            self._turns.append(assistant_turn)
            log_event(
                logging.INFO,
                "Completed submission",
                log_ctx,
                elapsed_seconds=round(time.time() - start_time, 2),
                turns=len(self._turns),
            )
            return assistant_turn
        finally:
            self._busy = False

    async def _respond(self, message: str, prior: List[ConversationTurn], log_ctx) -> str:
        skill = self._skills.find_matching(message) if self._skills else None
        if skill is not None:
            log_event(logging.INFO, "Matched skill", log_ctx, skill=skill.name)
        try:
            context = self._assembler.build()
            result = await self._router.route(
                provider=getattr(self._settings, "provider", "local"),
                message=message,
                context=context,
                history=prior,
                settings=self._settings,
                skill=skill,
                log_ctx=log_ctx,
            )
        except BusinessError as exc:
            log_event(logging.WARNING, "Submission failed", log_ctx, code=exc.code, error=exc.message)
            return f"Error: {exc.message}"
        return result.content
