"""ANSI 转义序列清理。"""

import re

# CSI 序列：ESC [ 参数 终止字母（颜色、光标移动、清屏等）
ANSI_CSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
# OSC 序列：ESC ] ... BEL 或 ESC \（终端标题、超链接）
ANSI_OSC_RE = re.compile(r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")


def strip_ansi(text: str) -> str:
    if not text:
        return text
    text = ANSI_OSC_RE.sub("", text)
    return ANSI_CSI_RE.sub("", text)
