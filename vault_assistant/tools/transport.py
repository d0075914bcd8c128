"""工具服务器传输层：JSON-RPC 2.0 over HTTP。

两个方法：
- tools/list  → POST {base}/list，响应 {"result": {"tools": [...]}}（也接受顶层 tools）。
- tools/call  → POST {base}/call，参数 {name, arguments}，响应 {"result": ...}。
"""

from itertools import count
from typing import Any, Dict, List

import httpx

from vault_assistant.domain.exceptions import ApiError, NetworkError, ToolCallError, TransportError
from vault_assistant.tools.definitions import ToolDescriptor

_request_ids = count(1)


class JsonRpcTransport:
    def __init__(self, timeout: float = 10.0) -> None:
        self._timeout = timeout

    @staticmethod
    def _envelope(method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"jsonrpc": "2.0", "id": next(_request_ids), "method": method, "params": params}

    async def _post(self, url: str, body: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout, trust_env=False) as client:
            return await client.post(url, json=body, headers={"Content-Type": "application/json"})

    async def list_tools(self, base_url: str, server: str) -> List[ToolDescriptor]:
        """请求一个服务器的工具目录；任何失败都抛出 TransportError。"""

        try:
            resp = await self._post(f"{base_url.rstrip('/')}/list", self._envelope("tools/list", {}))
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), server=server)
        if resp.status_code >= 400:
            raise ApiError(code="TOOLS_LIST_FAILED", message=resp.text, http_status=resp.status_code, server=server)
        try:
            data = resp.json()
            result = data.get("result", data)
            tools_raw = result.get("tools") or []
            return [ToolDescriptor.from_payload(t, server) for t in tools_raw]
        except (ValueError, AttributeError, KeyError, TypeError) as e:
            raise TransportError(code="MALFORMED_REPLY", message=f"malformed tools/list reply: {e}", server=server)

    async def call_tool(self, base_url: str, server: str, tool: str, arguments: Dict[str, Any]) -> Any:
        """调用单个工具并返回原始 result；失败抛出携带状态码的 ToolCallError。"""

        body = self._envelope("tools/call", {"name": tool, "arguments": arguments})
        try:
            resp = await self._post(f"{base_url.rstrip('/')}/call", body)
        except httpx.RequestError as e:
            raise ToolCallError(code="TOOL_CALL_FAILED", message=str(e), http_status=0, server=server, tool=tool)
        if resp.status_code >= 400:
            raise ToolCallError(
                code="TOOL_CALL_FAILED",
                message=f"tool call failed: {resp.status_code} {resp.reason_phrase}",
                http_status=resp.status_code,
                server=server,
                tool=tool,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise ToolCallError(
                code="TOOL_CALL_FAILED", message=f"malformed reply: {e}", http_status=resp.status_code, server=server, tool=tool
            )
        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ToolCallError(
                code="TOOL_CALL_FAILED", message=str(message), http_status=resp.status_code, server=server, tool=tool
            )
        return data.get("result") if isinstance(data, dict) else None
