"""技能注册表。

以技能名为键保存 Skill（dict 保持插入顺序），
find_matching 按插入顺序返回第一个命中的启用技能，不做多技能排序。
"""

from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Optional

from vault_assistant.domain.exceptions import BusinessError, ParseError
from vault_assistant.domain.workspace import WorkspaceStore
from vault_assistant.infrastructure.logging.logger import logger
from vault_assistant.skills.defaults import builtin_skills
from vault_assistant.skills.models import Skill, SkillDocument
from vault_assistant.skills.parser import parse_skill_document

SKILL_FILE_SUFFIX = ".md"


class SkillRegistry:
    def __init__(self) -> None:
        self._skills: Dict[str, Skill] = {}

    def __len__(self) -> int:
        return len(self._skills)

    def load(self, documents: Optional[Iterable[SkillDocument]]) -> int:
        """从文档序列重建注册表，返回加载后的技能数。

        documents 为 None（来源不可用）或没有任何文档时加载内置技能。
        """

        self._skills.clear()
        if documents is not None:
            for doc in documents:
                skill = parse_skill_document(doc.content, doc.identifier)
                self._skills[skill.name] = skill
        if not self._skills:
            self.load_defaults()
        logger.info("Loaded skills", extra={"extra": {"count": len(self._skills), "names": list(self._skills)}})
        return len(self._skills)

    def load_defaults(self) -> None:
        self._skills.clear()
        for skill in builtin_skills():
            self._skills[skill.name] = skill

    def load_from_store(self, store: WorkspaceStore, skills_dir: str) -> int:
        """从笔记库中的技能目录加载 *.md 技能文件。

        目录不存在或读取失败时退回内置技能；单个文件无法解码时跳过该文件。
        """

        try:
            documents = list(self._read_documents(store, skills_dir))
        except (OSError, BusinessError) as exc:
            logger.warning(
                "Skills directory unavailable, using built-in skills",
                extra={"extra": {"skills_dir": skills_dir, "error": str(exc)}},
            )
            documents = None
        return self.load(documents)

    def _read_documents(self, store: WorkspaceStore, skills_dir: str) -> Iterable[SkillDocument]:
        prefix = skills_dir.strip().strip("/")
        if not prefix:
            return
        for entry in store.list_files(prefix + "/"):
            # 只读取技能目录的直接子文件
            if "/" in entry.path[len(prefix) + 1:]:
                continue
            if not entry.name.endswith(SKILL_FILE_SUFFIX):
                continue
            try:
                content = self._read_text(store, entry.path)
            except ParseError as exc:
                logger.warning("Skipping unreadable skill file", extra={"extra": {"path": entry.path, "error": exc.message}})
                continue
            yield SkillDocument(identifier=PurePosixPath(entry.name).stem, content=content)

    @staticmethod
    def _read_text(store: WorkspaceStore, path: str) -> str:
        try:
            return store.read_file(path)
        except UnicodeDecodeError as exc:
            raise ParseError(code="SKILL_PARSE_ERROR", message=f"{path}: {exc}")

    # ---- 查询 ----------------------------------------------------

    def skills(self) -> List[Skill]:
        return list(self._skills.values())

    def get(self, name: str) -> Optional[Skill]:
        return self._skills.get(name)

    def find_matching(self, prompt: str) -> Optional[Skill]:
        if not prompt:
            return None
        for skill in self._skills.values():
            if not skill.enabled:
                continue
            if skill.matching_trigger(prompt) is not None:
                return skill
        return None

    # ---- 修改 ----------------------------------------------------

    def enable(self, name: str, enabled: bool) -> None:
        skill = self._skills.get(name)
        if skill:
            skill.enabled = enabled

    def add(self, skill: Skill) -> None:
        self._skills[skill.name] = skill

    def remove(self, name: str) -> None:
        self._skills.pop(name, None)
