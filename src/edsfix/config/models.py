from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..context.assembler import DEFAULT_MAX_CONTEXT_CHARS
from ..context.scanner import DEFAULT_EXCLUDED_DIRS, DEFAULT_EXTENSIONS


@dataclass
class BehaviorConfig:
    """Behavior config loaded from JSON.

    blocks_root is where the site's block sources live; each block is a
    subdirectory named after it.
    """

    blocks_root: Path = field(default_factory=lambda: Path("blocks"))
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude_dirs: frozenset[str] = DEFAULT_EXCLUDED_DIRS
    max_context_chars: int = DEFAULT_MAX_CONTEXT_CHARS

    # None means "use the built-in prompt" for each tool.
    match_system_prompt: str | None = None
    fix_system_prompt: str | None = None

    loaded_from: Path | None = None
