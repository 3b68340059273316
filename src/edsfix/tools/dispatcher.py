from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from .base import ToolContext, ToolResult
from .registry import ToolRegistry
from .validation import validate_arguments
from ..errors import InvalidArguments, UnknownTool

log = logging.getLogger(__name__)


@dataclass
class ToolDispatcher:
    """Route a named invocation to its tool and always answer with an envelope.

    Unknown names, schema violations and anything raised inside a tool come
    back as ToolResult(is_error=True); nothing escapes to the transport.
    """

    registry: ToolRegistry
    ctx: ToolContext

    def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        args = {} if arguments is None else arguments
        try:
            tool = self.registry.get(name)
        except UnknownTool as e:
            log.warning("%s", e)
            return ToolResult.error(str(e))

        try:
            validate_arguments(tool.spec, args)
        except InvalidArguments as e:
            log.warning("%s", e)
            return ToolResult.error(str(e))

        started = time.perf_counter()
        try:
            result = tool.execute(self.ctx, args)
        except Exception as e:
            log.exception("tool %s failed", name)
            return ToolResult.error(f"Error: {e}")

        log.info(
            "tool %s finished in %.0f ms (is_error=%s)",
            name, (time.perf_counter() - started) * 1000, result.is_error,
        )
        return result
