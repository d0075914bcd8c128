"""Minimal demonstration of the assistant service against a local vault."""

import asyncio
import sys

from vault_assistant import create_default_service


async def main(vault: str, question: str) -> None:
    service = create_default_service(vault)
    await service.start()
    try:
        print("Skills:", ", ".join(s.name for s in service.skills.skills()))
        reply = await service.chat(question)
        print("User:", question)
        print("Assistant:", reply["assistant_message"]["content"] if reply else "")
        print("README:", await service.execute_file_operation("read", "README.md"))
    finally:
        await service.stop()


if __name__ == "__main__":
    vault_dir = sys.argv[1] if len(sys.argv) > 1 else "."
    asyncio.run(main(vault_dir, "请解释这个笔记库的结构"))
