from __future__ import annotations

from .registry import ToolRegistry

from .builtin_tools.match_block import MatchHtmlToBlockTool
from .builtin_tools.fix_block import FixBlockBasedOnSuggestionTool

def register_builtin_tools(registry: ToolRegistry) -> None:
    registry.register(MatchHtmlToBlockTool())
    registry.register(FixBlockBasedOnSuggestionTool())
