from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..base import ToolContext, ToolResult
from ...errors import GenerationFailure
from ...context.assembler import assemble_context
from ...context.scanner import scan_directory

log = logging.getLogger(__name__)


def build_directory_context(ctx: ToolContext, root: Path, extensions: list[str] | tuple[str, ...] | None = None) -> str:
    cfg = ctx.config
    if extensions is None:
        extensions = cfg.extensions
    records = scan_directory(root, extensions, cfg.exclude_dirs)
    return assemble_context(records, cfg.max_context_chars)


def generation_options(args: dict[str, Any]) -> dict[str, Any]:
    opts: dict[str, Any] = {}
    if args.get("temperature") is not None:
        opts["temperature"] = float(args["temperature"])
    if args.get("maxTokens") is not None:
        opts["max_tokens"] = int(args["maxTokens"])
    return opts


def generate(ctx: ToolContext, message: str, system_prompt: str, options: dict[str, Any]) -> str:
    """Ask the model; raise GenerationFailure for exceptions and unsuccessful results alike."""
    try:
        result = ctx.llm.chat(message, system_prompt, **options)
    except Exception as e:
        log.exception("generation client raised")
        raise GenerationFailure(f"Error calling Azure OpenAI: {e}") from e
    if not result.success:
        raise GenerationFailure(f"Error calling Azure OpenAI: {result.error or 'unknown error'}")
    return result.content


def generate_result(ctx: ToolContext, message: str, system_prompt: str, options: dict[str, Any]) -> ToolResult:
    """Send the prompt pair to the model and wrap the answer in an envelope."""
    try:
        return ToolResult.text(generate(ctx, message, system_prompt, options))
    except GenerationFailure as e:
        log.warning("%s", e)
        return ToolResult.error(str(e))
