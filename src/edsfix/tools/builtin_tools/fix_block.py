from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..base import ToolSpec, ToolResult, ToolContext
from ...errors import EdsFixError
from ...util.fs import FsError, resolve_child
from .generation import build_directory_context, generate_result, generation_options

DEFAULT_FIX_PROMPT = """You are a Web Accessibility Expert and Frontend Developer. Your task is to analyze accessibility problems in HTML and provide specific code changes to fix them.

Given:
1. Block code content with accessibility problems (JavaScript and CSS)
2. A suggestion for fixing the accessibility problem

You should:
1. Analyze the block code and identify the specific accessibility issue
2. Understand how the block code generates or styles the HTML
3. Provide exact code changes needed in the JavaScript and CSS files to implement the accessibility fix
4. Focus on practical, implementable solutions. Do not make up any information. Be sure to also check for class names and other attributes that may be used in the code.
5. Ensure the fix follows WCAG guidelines and best practices

Format your response with:
- Clear explanation of the accessibility issue
- Specific changes for JavaScript files (if needed)
- Specific changes for CSS files (if needed)
- Implementation notes or considerations"""

FIX_CONTEXT_NOTE = (
    "\n\nYou have been provided with the complete code context from the blocks directory. "
    "Use this code context to understand the existing patterns and structure. "
    "Provide changes that are consistent with the existing codebase style and patterns. "
    "Be sure to also check if there are needed any changes in the CSS styles as a result of the fix."
)


def build_fix_prompt(block_name: str, suggestion: str) -> str:
    return (
        "\nBlock with accessibility problem:\n"
        f"```\n{block_name}\n```\n\n"
        "Accessibility fix suggestion:\n"
        f"{suggestion}\n\n"
        "Please analyze this accessibility issue and provide the specific code changes needed "
        "and then do these changes in the JavaScript and CSS files to implement the suggested fix."
    )

@dataclass
class FixBlockBasedOnSuggestionTool:
    spec: ToolSpec = ToolSpec(
        name="fix_block_based_on_suggestion",
        description="Generate fixes in a block based on suggestion",
        parameters={
            "type": "object",
            "properties": {
                "blockName": {"type": "string", "description": "The name of the block where the accessibility problem lies"},
                "suggestion": {"type": "string", "description": "The suggestion on how to fix the accessibility problem"},
                "systemPrompt": {"type": "string", "description": "Optional system prompt to set context"},
                "temperature": {"type": "number", "description": "Temperature for response randomness (0-2, default: 0.2)"},
                "maxTokens": {"type": "integer", "description": "Maximum tokens to generate (default: 10000)"},
                "fileExtensions": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Optional array of file extensions to include (default: [.js, .css])",
                },
            },
            "required": ["blockName", "suggestion"],
        },
    )

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
        block_name = args["blockName"].strip()
        message = build_fix_prompt(block_name, args["suggestion"])
        display = f"{ctx.config.blocks_root}/{block_name}"
        try:
            block_dir = resolve_child(ctx.config.blocks_root, block_name)
            context = build_directory_context(ctx, block_dir, args.get("fileExtensions"))
        except (EdsFixError, FsError, OSError) as e:
            return ToolResult.error(f"Error reading directory {display}: {e}")

        base_prompt = args.get("systemPrompt") or ctx.config.fix_system_prompt or DEFAULT_FIX_PROMPT
        return generate_result(
            ctx,
            f"{message}\n{context}",
            base_prompt + FIX_CONTEXT_NOTE,
            generation_options(args),
        )
