from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ToolSpec, ToolResult, ToolContext
from ...errors import EdsFixError
from .generation import build_directory_context, generate_result, generation_options

DEFAULT_MATCH_PROMPT = (
    "You are a Web Engineering Specialist. You are given Javascript code and can determine "
    "the HTML code that will be rendered and then match it to the HTML code that is provided."
)

MATCH_CONTEXT_NOTE = (
    "\n\nYou have been provided with the complete code context from the blocks directory. "
    "Use this code context to provide a response. Do not make up any information. "
    "Be sure to also check for class names and other attributes that may be used in the code. "
    "Tell me the name of the block that generates the html code that is provided."
)

@dataclass
class MatchHtmlToBlockTool:
    spec: ToolSpec = ToolSpec(
        name="match_html_to_block",
        description="Find the block that generates the html code that is provided",
        parameters={
            "type": "object",
            "properties": {
                "message": {"type": "string", "description": "The message/question, usually the rendered HTML to match"},
                "systemPrompt": {"type": "string", "description": "Optional system prompt to set context"},
                "temperature": {"type": "number", "description": "Temperature for response randomness (0-2, default: 0.2)"},
                "maxTokens": {"type": "integer", "description": "Maximum tokens to generate (default: 10000)"},
            },
            "required": ["message"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        root = ctx.config.blocks_root
        message = args["message"]
        try:
            context = build_directory_context(ctx, root)
        except (EdsFixError, OSError) as e:
            return ToolResult.error(f"Error reading directory {root}: {e}")

        base_prompt = args.get("systemPrompt") or ctx.config.match_system_prompt or DEFAULT_MATCH_PROMPT
        return generate_result(
            ctx,
            f"{message}\n{context}",
            base_prompt + MATCH_CONTEXT_NOTE,
            generation_options(args),
        )
