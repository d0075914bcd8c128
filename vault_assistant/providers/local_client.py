"""本地可执行程序 Provider。

以用户消息作为命令行参数调用本地 CLI（默认 ``opencode run <prompt>``），
工作目录为笔记库根目录。stdout 去除 ANSI 转义后即为回复；
硬超时与输出上限任一超出都视为失败，不会挂起。
"""

import asyncio

from vault_assistant.domain.exceptions import ProcessError
from vault_assistant.domain.models import ChatRequest, ChatResult
from vault_assistant.infrastructure.logging.logger import logger
from vault_assistant.providers.base import NO_RESPONSE
from vault_assistant.utils.ansi import strip_ansi

READ_CHUNK_SIZE = 64 * 1024


class LocalExecutableClient:
    name = "local"

    def __init__(self, settings):
        self._settings = settings

    async def send(self, req: ChatRequest) -> ChatResult:
        command = getattr(self._settings, "local_command", "opencode")
        args = list(getattr(self._settings, "local_args", ["run"]))
        prefix = getattr(self._settings, "local_prompt_prefix", "")
        timeout = getattr(self._settings, "local_timeout", 60.0)
        max_output = getattr(self._settings, "local_max_output", 10 * 1024 * 1024)

        try:
            proc = await asyncio.create_subprocess_exec(
                command,
                *args,
                f"{prefix}{req.prompt}",
                cwd=getattr(self._settings, "workspace_root", None),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            # ValueError: 参数中含有 NUL 等非法字符
            raise ProcessError(code="PROCESS_START_FAILED", message=f"Failed to run {command}: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(self._communicate(proc, max_output), timeout=timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            raise ProcessError(code="PROCESS_TIMEOUT", message=f"Failed to run {command}: timed out after {timeout}s")
        except ProcessError:
            await self._kill(proc)
            raise

        reply = strip_ansi(stdout.decode("utf-8", errors="replace")).strip()
        if proc.returncode != 0:
            if not reply:
                detail = strip_ansi(stderr.decode("utf-8", errors="replace")).strip()
                raise ProcessError(
                    code="PROCESS_FAILED",
                    message=f"Failed to run {command}: {detail or f'exit code {proc.returncode}'}",
                    returncode=proc.returncode,
                )
            # 非零退出但有输出：输出仍作为回复
            logger.warning(
                "Local command exited non-zero with output",
                extra={"extra": {"command": command, "returncode": proc.returncode}},
            )
        return ChatResult(
            provider=self.name,
            model=command,
            content=reply or NO_RESPONSE,
            meta={"returncode": proc.returncode},
        )

    async def _communicate(self, proc: asyncio.subprocess.Process, max_output: int):
        stdout, stderr = await asyncio.gather(
            self._read_capped(proc.stdout, max_output),
            self._read_capped(proc.stderr, max_output),
        )
        await proc.wait()
        return stdout, stderr

    @staticmethod
    async def _read_capped(stream: asyncio.StreamReader, max_output: int) -> bytes:
        buf = bytearray()
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                return bytes(buf)
            buf.extend(chunk)
            if len(buf) > max_output:
                raise ProcessError(code="OUTPUT_LIMIT", message=f"local command output exceeded {max_output} bytes")

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
