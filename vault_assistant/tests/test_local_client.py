import sys

import pytest

from vault_assistant.domain.exceptions import ProcessError
from vault_assistant.domain.models import ChatRequest
from vault_assistant.providers.local_client import LocalExecutableClient


def make_settings(script, tmp_path, timeout=10.0, max_output=1024 * 1024):
    class SettingsStub:
        local_command = sys.executable
        local_args = ["-c", script]
        local_prompt_prefix = ""
        local_timeout = timeout
        local_max_output = max_output
        workspace_root = str(tmp_path)

    return SettingsStub()


def request(prompt="hello"):
    return ChatRequest(provider="local", model="", system_prompt="", messages=[], prompt=prompt)


@pytest.mark.asyncio
async def test_strips_ansi_sequences(tmp_path):
    script = "import sys; sys.stdout.write('\\x1b[32mHello\\x1b[0m')"
    res = await LocalExecutableClient(make_settings(script, tmp_path)).send(request())
    assert res.content == "Hello"


@pytest.mark.asyncio
async def test_prompt_is_passed_as_argument_in_workspace(tmp_path):
    script = "import os, sys; print(sys.argv[1]); print(os.getcwd())"
    res = await LocalExecutableClient(make_settings(script, tmp_path)).send(request("what is this vault"))
    lines = res.content.splitlines()
    assert lines[0] == "what is this vault"
    assert lines[1] == str(tmp_path.resolve())


@pytest.mark.asyncio
async def test_non_zero_exit_with_output_is_a_reply(tmp_path):
    script = "import sys; print('\\x1b[1mpartial answer\\x1b[0m'); sys.exit(3)"
    res = await LocalExecutableClient(make_settings(script, tmp_path)).send(request())
    assert res.content == "partial answer"
    assert res.meta["returncode"] == 3


@pytest.mark.asyncio
async def test_non_zero_exit_without_output_fails(tmp_path):
    script = "import sys; sys.stderr.write('model unavailable'); sys.exit(2)"
    with pytest.raises(ProcessError) as exc_info:
        await LocalExecutableClient(make_settings(script, tmp_path)).send(request())
    assert "model unavailable" in exc_info.value.message


@pytest.mark.asyncio
async def test_timeout_is_a_failure(tmp_path):
    script = "import time; time.sleep(10)"
    with pytest.raises(ProcessError) as exc_info:
        await LocalExecutableClient(make_settings(script, tmp_path, timeout=0.5)).send(request())
    assert exc_info.value.code == "PROCESS_TIMEOUT"


@pytest.mark.asyncio
async def test_output_cap_is_a_failure(tmp_path):
    script = "import sys; sys.stdout.write('x' * 5000)"
    with pytest.raises(ProcessError) as exc_info:
        await LocalExecutableClient(make_settings(script, tmp_path, max_output=100)).send(request())
    assert exc_info.value.code == "OUTPUT_LIMIT"


@pytest.mark.asyncio
async def test_missing_executable_fails(tmp_path):
    settings = make_settings("", tmp_path)
    settings.local_command = str(tmp_path / "no-such-binary")
    with pytest.raises(ProcessError) as exc_info:
        await LocalExecutableClient(settings).send(request())
    assert exc_info.value.code == "PROCESS_START_FAILED"


@pytest.mark.asyncio
async def test_prompt_with_nul_byte_fails_to_start(tmp_path):
    with pytest.raises(ProcessError) as exc_info:
        await LocalExecutableClient(make_settings("print('x')", tmp_path)).send(request("bad\x00prompt"))
    assert exc_info.value.code == "PROCESS_START_FAILED"
