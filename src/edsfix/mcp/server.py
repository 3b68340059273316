from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, TextIO

from ..tools.dispatcher import ToolDispatcher
from ..tools.registry import ToolRegistry

log = logging.getLogger(__name__)

SERVER_NAME = "eds-auto-fix-mcp-server"
PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


class RpcError(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass
class StdioServer:
    """JSON-RPC 2.0 over stdio, one message per line.

    Requests are handled one at a time, in arrival order. Tool failures are
    returned in-band as {"isError": true}; only protocol problems (bad JSON,
    unknown method, malformed params) use JSON-RPC errors.
    """

    registry: ToolRegistry
    dispatcher: ToolDispatcher
    version: str = "1.0.0"

    def _reply(self, out: TextIO, rid: Any, result: Any = None, error: RpcError | None = None) -> None:
        msg: dict[str, Any] = {"jsonrpc": "2.0", "id": rid}
        if error is not None:
            msg["error"] = {"code": error.code, "message": error.message}
        else:
            msg["result"] = result
        out.write(json.dumps(msg) + "\n")
        out.flush()

    def handle(self, method: Any, params: dict[str, Any]) -> Any:
        if method == "initialize":
            return {
                "protocolVersion": params.get("protocolVersion") or PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": SERVER_NAME, "version": self.version},
            }
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": [s.to_wire() for s in self.registry.list_specs()]}
        if method == "tools/call":
            name = params.get("name")
            if not isinstance(name, str) or not name:
                raise RpcError(INVALID_PARAMS, "tools/call requires a tool name")
            args = params.get("arguments")
            if args is None:
                args = {}
            return self.dispatcher.invoke(name, args).to_wire()
        raise RpcError(METHOD_NOT_FOUND, f"Unknown method: {method}")

    def handle_line(self, line: str, out: TextIO) -> None:
        line = line.strip()
        if not line:
            return
        try:
            req = json.loads(line)
        except json.JSONDecodeError as e:
            log.warning("unparseable request: %s", e)
            self._reply(out, None, error=RpcError(PARSE_ERROR, f"Parse error: {e}"))
            return
        if not isinstance(req, dict):
            self._reply(out, None, error=RpcError(INVALID_REQUEST, "Request must be a JSON object"))
            return

        method = req.get("method")
        # Notifications carry no id and get no reply.
        if "id" not in req:
            log.debug("notification %s", method)
            return
        rid = req.get("id")
        params = req.get("params") or {}
        if not isinstance(params, dict):
            self._reply(out, rid, error=RpcError(INVALID_PARAMS, "params must be an object"))
            return

        try:
            result = self.handle(method, params)
        except RpcError as e:
            self._reply(out, rid, error=e)
            return
        self._reply(out, rid, result)

    def serve(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        # Undecodable bytes become U+FFFD and then a parse error for that line.
        if hasattr(stdin, "reconfigure"):
            stdin.reconfigure(errors="replace")
        log.info("%s %s listening on stdio (%d tools)", SERVER_NAME, self.version, len(self.registry.names()))
        for line in stdin:
            self.handle_line(line, stdout)
        log.info("stdin closed, shutting down")


def install_signal_handlers() -> None:
    """Exit at once on SIGINT/SIGTERM; in-flight requests are not drained."""
    import signal

    def _exit(signum, frame):
        log.info("received signal %s, exiting", signum)
        sys.exit(0)

    signal.signal(signal.SIGINT, _exit)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _exit)
