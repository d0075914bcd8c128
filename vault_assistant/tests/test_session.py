import asyncio
import sys

import pytest

from vault_assistant.agents.session import ConversationSession
from vault_assistant.context import ContextAssembler
from vault_assistant.domain.exceptions import ApiError
from vault_assistant.domain.models import ChatResult
from vault_assistant.providers.local_client import LocalExecutableClient
from vault_assistant.providers.router import ProviderRouter
from vault_assistant.skills import SkillRegistry


class SettingsStub:
    provider = "fake"
    system_prompt = "sys"
    model = "m"
    max_tokens = 10
    temperature = 0.1
    history_window = 10


class EmptyStore:
    def get_active_document(self):
        return None

    def list_files(self, prefix=None):
        return []


class FakeClient:
    requests = []
    gate = None
    fail = False

    def __init__(self, settings):
        pass

    async def send(self, req):
        FakeClient.requests.append(req)
        if FakeClient.gate is not None:
            await FakeClient.gate.wait()
        if FakeClient.fail:
            raise ApiError(code="API_ERROR", message="API Error: 500 - upstream", http_status=500)
        return ChatResult(provider="fake", model="m", content=f"reply to {req.prompt}")


@pytest.fixture(autouse=True)
def reset_fake_client():
    FakeClient.requests = []
    FakeClient.gate = None
    FakeClient.fail = False
    yield


def make_session(skills=None):
    return ConversationSession(
        router=ProviderRouter(clients={"fake": FakeClient}),
        assembler=ContextAssembler(EmptyStore()),
        settings=SettingsStub(),
        skills=skills,
    )


@pytest.mark.asyncio
async def test_submit_appends_user_and_assistant_turns():
    session = make_session()
    turn = await session.submit("  hello  ")
    assert turn.content == "reply to hello"
    assert [(t.role, t.content) for t in session.history] == [("user", "hello"), ("assistant", "reply to hello")]
    assert session.busy is False


@pytest.mark.asyncio
async def test_history_window_excludes_current_message():
    session = make_session()
    await session.submit("first")
    await session.submit("second")
    req = FakeClient.requests[-1]
    assert [m.content for m in req.messages] == ["Current vault context: Vault files: ", "first", "reply to first", "second"]


@pytest.mark.asyncio
async def test_empty_message_is_ignored():
    session = make_session()
    assert await session.submit("   ") is None
    assert session.history == ()
    assert FakeClient.requests == []


@pytest.mark.asyncio
async def test_concurrent_submit_is_dropped():
    FakeClient.gate = asyncio.Event()
    session = make_session()
    first = asyncio.create_task(session.submit("one"))
    await asyncio.sleep(0)
    assert session.busy is True
    second = await session.submit("two")
    FakeClient.gate.set()
    result = await first
    assert second is None
    assert result.content == "reply to one"
    assert len(FakeClient.requests) == 1
    assert [t.content for t in session.history] == ["one", "reply to one"]


@pytest.mark.asyncio
async def test_provider_failure_becomes_error_turn():
    FakeClient.fail = True
    session = make_session()
    turn = await session.submit("hi")
    assert turn.role == "assistant"
    assert turn.content == "Error: API Error: 500 - upstream"
    assert session.busy is False
    FakeClient.fail = False
    turn = await session.submit("again")
    assert turn.content == "reply to again"


@pytest.mark.asyncio
async def test_unknown_provider_becomes_error_turn():
    session = make_session()
    session._settings.provider = "nope"
    turn = await session.submit("hi")
    assert turn.content.startswith("Error: Unknown provider")


@pytest.mark.asyncio
async def test_matching_skill_is_folded_into_system_prompt():
    skills = SkillRegistry()
    skills.load(None)
    session = make_session(skills)
    await session.submit("Can you REFACTOR this function?")
    req = FakeClient.requests[-1]
    assert req.system_prompt.startswith("sys\n\n[Skill: refactor]\nYou are a refactoring expert.")


@pytest.mark.asyncio
async def test_clear_empties_history_only():
    skills = SkillRegistry()
    skills.load(None)
    session = make_session(skills)
    await session.submit("hello")
    session.clear()
    assert session.history == ()
    assert len(skills) == 5


@pytest.mark.asyncio
async def test_local_process_start_failure_becomes_error_turn():
    settings = SettingsStub()
    settings.provider = "local"
    settings.local_command = sys.executable
    settings.local_args = ["-c", "print('x')"]
    session = ConversationSession(
        router=ProviderRouter(clients={"local": LocalExecutableClient}),
        assembler=ContextAssembler(EmptyStore()),
        settings=settings,
    )
    turn = await session.submit("bad\x00prompt")
    assert turn.role == "assistant"
    assert turn.content.startswith("Error: Failed to run")
    assert session.busy is False
