"""宿主笔记库（vault）存储接口。

核心层只通过此协议读写笔记，具体实现由宿主提供；
infrastructure.storage.workspace_store 提供基于本地文件系统的实现。
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class ActiveDocument:
    """编辑器当前打开的文档。"""

    name: str
    content: str


@dataclass(frozen=True)
class FileEntry:
    """库中的一个文件：path 为相对库根目录的路径，name 为文件名。"""

    path: str
    name: str


class WorkspaceStore(Protocol):
    def get_active_document(self) -> Optional[ActiveDocument]:
        ...

    def list_files(self, prefix: Optional[str] = None) -> List[FileEntry]:
        """按路径顺序列出文件；给定 prefix 时只返回路径以其开头的文件。"""
        ...

    def read_file(self, path: str) -> str:
        """读取文件内容，不存在时抛出 NotFoundError。"""
        ...

    def write_file(self, path: str, content: str) -> None:
        """写入文件内容，失败时抛出 WriteError。"""
        ...
