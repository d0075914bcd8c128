"""上下文组装。

把编辑器当前文档摘录与库文件列表拼成一段文本，
两个上限（字符数、文件数）用于约束出站请求的大小。
"""

from typing import List

from vault_assistant.domain.workspace import WorkspaceStore

DEFAULT_MAX_CHARS = 2000
DEFAULT_MAX_FILES = 50
TRUNCATION_MARKER = "\n...[truncated]"


class ContextAssembler:
    def __init__(
        self,
        store: WorkspaceStore,
        max_chars: int = DEFAULT_MAX_CHARS,
        max_files: int = DEFAULT_MAX_FILES,
    ) -> None:
        self._store = store
        self._max_chars = max(0, max_chars)
        self._max_files = max(0, max_files)

    def build(self) -> str:
        sections: List[str] = []

        doc = self._store.get_active_document()
        if doc is not None:
            excerpt = doc.content[: self._max_chars]
            if len(doc.content) > self._max_chars:
                excerpt += TRUNCATION_MARKER
            sections.append(f"Current file ({doc.name}):\n{excerpt}")

        files = self._store.list_files()
        listed = ", ".join(entry.path for entry in files[: self._max_files])
        hidden = len(files) - self._max_files
        if hidden > 0:
            listed += f", ... (+{hidden} more)"
        sections.append(f"Vault files: {listed}")

        return "\n\n".join(sections)
