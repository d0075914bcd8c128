"""技能（skill）子系统。

- models: Skill 数据结构。
- parser: 带 front-matter 的技能文档解析。
- defaults: 内置的五个默认技能。
- registry: SkillRegistry，负责加载、触发匹配与增删改。
"""

from vault_assistant.skills.models import Skill, SkillDocument
from vault_assistant.skills.registry import SkillRegistry

__all__ = ["Skill", "SkillDocument", "SkillRegistry"]
