"""基于本地文件系统的笔记库存储实现。"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from vault_assistant.domain.exceptions import NotFoundError, WriteError
from vault_assistant.domain.workspace import ActiveDocument, FileEntry


@dataclass
class LocalWorkspaceStore:
    """以 vault 根目录为边界的文件存储。

    所有路径都相对 root 解析，越界路径视为不存在（读）或写入失败（写）。
    active_path 由宿主在切换编辑器文档时更新。
    """

    root: Path
    active_path: Optional[str] = None
    ignore_hidden: bool = True
    _root_resolved: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.root = Path(self.root).expanduser()
        self._root_resolved = self.root.resolve()

    # ---- helpers -------------------------------------------------

    def _resolve(self, raw: str) -> Optional[Path]:
        text = (raw or "").strip()
        if not text:
            return None
        base = Path(text).expanduser()
        candidate = base.resolve() if base.is_absolute() else (self._root_resolved / base).resolve()
        try:
            candidate.relative_to(self._root_resolved)
        except ValueError:
            return None
        return candidate

    def _relative(self, path: Path) -> str:
        return path.relative_to(self._root_resolved).as_posix()

    def set_active_document(self, path: Optional[str]) -> None:
        self.active_path = path

    # ---- read ops ------------------------------------------------

    def get_active_document(self) -> Optional[ActiveDocument]:
        if not self.active_path:
            return None
        resolved = self._resolve(self.active_path)
        if resolved is None or not resolved.is_file():
            return None
        try:
            content = resolved.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None
        return ActiveDocument(name=resolved.name, content=content)

    def list_files(self, prefix: Optional[str] = None) -> List[FileEntry]:
        if not self._root_resolved.is_dir():
            return []
        entries: List[FileEntry] = []
        for file in sorted(self._root_resolved.rglob("*")):
            if not file.is_file():
                continue
            rel = self._relative(file)
            if prefix:
                if not rel.startswith(prefix):
                    continue
            elif self.ignore_hidden and any(part.startswith(".") for part in rel.split("/")[:-1]):
                # 隐藏目录（如 .git、技能目录）只能通过 prefix 显式访问
                continue
            entries.append(FileEntry(path=rel, name=file.name))
        return entries

    def read_file(self, path: str) -> str:
        resolved = self._resolve(path)
        if resolved is None or not resolved.is_file():
            raise NotFoundError(code="FILE_NOT_FOUND", message=f"file not found: {path}", http_status=404)
        return resolved.read_text(encoding="utf-8")

    # ---- writes --------------------------------------------------

    def write_file(self, path: str, content: str) -> None:
        resolved = self._resolve(path)
        if resolved is None:
            raise WriteError(code="STORE_WRITE_ERROR", message=f"path outside vault: {path}")
        tmp_path = resolved.with_name(f".{resolved.name}.{uuid4().hex}.tmp")
        try:
            resolved.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, resolved)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise WriteError(code="STORE_WRITE_ERROR", message=str(e))
