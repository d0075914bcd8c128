import json

import httpx
import pytest

from vault_assistant.domain.exceptions import ToolCallError
from vault_assistant.infrastructure.storage.workspace_store import LocalWorkspaceStore
from vault_assistant.tools import ToolBridge, ToolDescriptor, ToolServerConfig, parse_server_configs
from vault_assistant.tools.transport import JsonRpcTransport


class FakeTransport:
    def __init__(self, catalogs, fail_call=False):
        self._catalogs = catalogs
        self._fail_call = fail_call
        self.calls = []

    async def list_tools(self, base_url, server):
        return [ToolDescriptor(name=n, description="", input_schema={}, server=server) for n in self._catalogs.get(server, [])]

    async def call_tool(self, base_url, server, tool, arguments):
        self.calls.append((server, tool, arguments))
        if self._fail_call:
            raise ToolCallError(code="TOOL_CALL_FAILED", message="boom", http_status=500)
        return {"server": server, "tool": tool}


def test_parse_server_configs_invalid_json_yields_no_servers():
    assert parse_server_configs("{not json") == []
    assert parse_server_configs('{"name": "x"}') == []
    assert parse_server_configs("") == []


def test_parse_server_configs_entries():
    raw = json.dumps([
        {"name": "filesystem", "command": "npx", "args": ["-y", "server-fs", "."], "env": {"A": 1}},
        {"command": "nameless"},
        {"name": "remote", "url": "http://127.0.0.1:9000"},
    ])
    servers = parse_server_configs(raw)
    assert [s.name for s in servers] == ["filesystem", "remote"]
    assert servers[0].args == ["-y", "server-fs", "."]
    assert servers[0].env == {"A": "1"}
    assert servers[1].url == "http://127.0.0.1:9000"


@pytest.mark.asyncio
async def test_connect_partial_availability(monkeypatch, tmp_path):
    class Resp:
        status_code = 200
        text = ""

        def json(self):
            return {"jsonrpc": "2.0", "id": 1, "result": {"tools": [
                {"name": "filesystem_read", "description": "read", "inputSchema": {"type": "object"}},
            ]}}

    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, **_):
            if url.startswith("http://down"):
                raise httpx.ConnectError("connection refused")
            assert json["method"] == "tools/list"
            return Resp()

    monkeypatch.setattr("httpx.AsyncClient", Client)
    bridge = ToolBridge(store=LocalWorkspaceStore(root=tmp_path), transport=JsonRpcTransport(timeout=1.0))
    await bridge.connect([
        ToolServerConfig(name="up", url="http://up:3000"),
        ToolServerConfig(name="down", url="http://down:3000"),
    ])
    assert {k: len(v) for k, v in bridge.catalog.items()} == {"up": 1, "down": 0}
    status = bridge.get_server_status()
    assert [(s.name, s.connected, s.tool_count) for s in status] == [("up", True, 1), ("down", True, 0)]


@pytest.mark.asyncio
async def test_read_falls_back_to_local_store(tmp_path):
    store = LocalWorkspaceStore(root=tmp_path)
    store.write_file("notes/a.md", "note body")
    bridge = ToolBridge(store=store, transport=FakeTransport({}))
    assert await bridge.execute_file_operation("read", "notes/a.md") == "note body"
    assert await bridge.execute_file_operation("read", "notes/missing.md") == "File not found"


@pytest.mark.asyncio
async def test_write_and_list_fall_back_to_local_store(tmp_path):
    store = LocalWorkspaceStore(root=tmp_path)
    bridge = ToolBridge(store=store, transport=FakeTransport({}))
    assert await bridge.execute_file_operation("write", "notes/new.md", "fresh") == "File written"
    assert store.read_file("notes/new.md") == "fresh"
    listed = json.loads(await bridge.execute_file_operation("list", "notes/"))
    assert listed == [{"name": "new.md", "path": "notes/new.md"}]


@pytest.mark.asyncio
async def test_exact_tool_is_preferred(tmp_path):
    transport = FakeTransport({"files": ["filesystem_read"], "filesystem": ["other_tool"]})
    bridge = ToolBridge(store=LocalWorkspaceStore(root=tmp_path), transport=transport)
    await bridge.connect([ToolServerConfig(name="files"), ToolServerConfig(name="filesystem")])
    result = await bridge.execute_file_operation("read", "a.md")
    assert json.loads(result) == {"server": "files", "tool": "filesystem_read"}
    assert transport.calls == [("files", "filesystem_read", {"path": "a.md"})]


@pytest.mark.asyncio
async def test_filesystem_server_tool_is_generic_substitute(tmp_path):
    transport = FakeTransport({"filesystem-server": ["fs_any", "fs_other"]})
    bridge = ToolBridge(store=LocalWorkspaceStore(root=tmp_path), transport=transport)
    await bridge.connect([ToolServerConfig(name="filesystem-server")])
    await bridge.execute_file_operation("write", "a.md", "body")
    assert transport.calls == [("filesystem-server", "fs_any", {"path": "a.md", "content": "body"})]


@pytest.mark.asyncio
async def test_failed_tool_call_does_not_fall_back(tmp_path):
    store = LocalWorkspaceStore(root=tmp_path)
    store.write_file("a.md", "local")
    bridge = ToolBridge(store=store, transport=FakeTransport({"fs": ["filesystem_read"]}, fail_call=True))
    await bridge.connect([ToolServerConfig(name="fs")])
    with pytest.raises(ToolCallError) as exc_info:
        await bridge.execute_file_operation("read", "a.md")
    assert exc_info.value.http_status == 500


@pytest.mark.asyncio
async def test_call_tool_reports_transport_status(monkeypatch, tmp_path):
    class Resp:
        status_code = 503
        reason_phrase = "Service Unavailable"
        text = "down"

    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, **_):
            assert url == "http://localhost:3000/call"
            assert json["params"] == {"name": "echo", "arguments": {"x": 1}}
            return Resp()

    monkeypatch.setattr("httpx.AsyncClient", Client)
    bridge = ToolBridge(store=LocalWorkspaceStore(root=tmp_path))
    with pytest.raises(ToolCallError) as exc_info:
        await bridge.call_tool("any", "echo", {"x": 1})
    assert exc_info.value.http_status == 503


@pytest.mark.asyncio
async def test_disconnect_is_idempotent(tmp_path):
    bridge = ToolBridge(store=LocalWorkspaceStore(root=tmp_path), transport=FakeTransport({"a": ["t"]}))
    await bridge.disconnect()
    await bridge.connect([ToolServerConfig(name="a")])
    assert len(bridge.tools()) == 1
    await bridge.disconnect()
    await bridge.disconnect()
    assert bridge.tools() == []
    assert [s.connected for s in bridge.get_server_status()] == [False]
