from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_SKILL_VERSION = "1.0.0"


@dataclass
class Skill:
    """一组指令与触发短语。

    用户消息命中任一触发短语（不区分大小写的子串匹配）时，
    instructions 会被并入本轮请求的系统提示词。
    """

    name: str
    instructions: str
    description: str = ""
    version: str = DEFAULT_SKILL_VERSION
    triggers: List[str] = field(default_factory=list)
    enabled: bool = True

    def matching_trigger(self, prompt: str) -> Optional[str]:
        lowered = prompt.lower()
        for trigger in self.triggers:
            if trigger and trigger.lower() in lowered:
                return trigger
        return None


@dataclass(frozen=True)
class SkillDocument:
    """待解析的技能文本；identifier 通常是文件名（不含扩展名）。"""

    identifier: str
    content: str
