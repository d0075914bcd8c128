"""技能文档解析。

文档格式::

    ---
    name: code-review
    description: Review code
    version: 1.0.0
    triggers: review code, analyze code
    ---
    You are a code review expert...

front-matter 必须位于文档开头（允许前导空行），以单独一行的 ``---`` 开始和结束。
块内按 ``key: value`` 逐行读取，值保持原文（``version: 1.10`` 不会变成数字，
``#bug`` 也不会被当作注释）。``triggers:`` 的值为空时，紧随其后的 ``- item``
行组成触发列表。解析从不失败：缺失或异常的字段使用默认值。
"""

from typing import Dict, List, Optional, Tuple, Union

from vault_assistant.skills.models import DEFAULT_SKILL_VERSION, Skill

FRONT_MATTER_DELIMITER = "---"
KNOWN_KEYS = ("name", "description", "version", "triggers")

FieldValue = Union[str, List[str]]


def parse_skill_document(content: str, identifier: str) -> Skill:
    """将一篇技能文档解析为 Skill。"""

    lines = content.split("\n")
    block = _split_front_matter(lines)
    if block is None:
        return Skill(name=identifier, instructions=content)

    header_lines, body_lines = block
    fields = _read_front_matter(header_lines)
    instructions = _collect_instructions(body_lines) or content
    return Skill(
        name=_as_text(fields.get("name")) or identifier,
        description=_as_text(fields.get("description")),
        version=_as_text(fields.get("version")) or DEFAULT_SKILL_VERSION,
        instructions=instructions,
        triggers=_as_triggers(fields.get("triggers")),
    )


def _split_front_matter(lines: List[str]) -> Optional[Tuple[List[str], List[str]]]:
    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start >= len(lines) or lines[start].strip() != FRONT_MATTER_DELIMITER:
        return None
    for end in range(start + 1, len(lines)):
        if lines[end].strip() == FRONT_MATTER_DELIMITER:
            return lines[start + 1:end], lines[end + 1:]
    # 未闭合的块视为没有 front-matter
    return None


def _read_front_matter(header_lines: List[str]) -> Dict[str, FieldValue]:
    fields: Dict[str, FieldValue] = {}
    list_key: Optional[str] = None
    for line in header_lines:
        stripped = line.strip()
        if list_key is not None and stripped.startswith("-"):
            items = fields.setdefault(list_key, [])
            if isinstance(items, list):
                items.append(stripped[1:].strip())
            continue
        list_key = None
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip().lower()
        if key not in KNOWN_KEYS:
            continue
        value = value.strip()
        if key == "triggers" and not value:
            list_key = key
            continue
        fields[key] = value
    return fields


def _collect_instructions(body_lines: List[str]) -> str:
    for idx, line in enumerate(body_lines):
        if line.strip():
            return "\n".join(body_lines[idx:])
    return ""


def _as_text(value: Optional[FieldValue]) -> str:
    if value is None or isinstance(value, list):
        return ""
    return value.strip()


def _as_triggers(value: Optional[FieldValue]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        raw = value
    else:
        text = value.strip()
        if text.startswith("[") and text.endswith("]"):
            text = text[1:-1]
        raw = text.split(",")
    triggers: List[str] = []
    for item in raw:
        cleaned = item.strip().strip("'\"").strip()
        # 空触发短语会匹配任意输入，必须丢弃
        if cleaned:
            triggers.append(cleaned)
    return triggers
