from __future__ import annotations

from typing import Iterable

from .scanner import FileRecord

DEFAULT_MAX_CONTEXT_CHARS = 50000

CONTEXT_HEADER = "\n\n--- DIRECTORY CODE CONTEXT ---\n\n"
CONTEXT_FOOTER = "\n--- END DIRECTORY CODE CONTEXT ---\n\n"
TRUNCATION_NOTICE = "\n[... Additional files truncated to stay within token limits ...]\n"


def render_file(record: FileRecord) -> str:
    return f"\n## File: {record.path}\n```\n{record.content}\n```\n"


def assemble_context(records: Iterable[FileRecord], max_length: int = DEFAULT_MAX_CONTEXT_CHARS) -> str:
    """Render file records into one fenced block of at most ~max_length chars.

    The header counts toward the budget. Files are taken in order until the
    next one would overflow it; then the truncation notice is added and the
    rest are dropped. The footer is always appended.
    """
    parts = [CONTEXT_HEADER]
    total = len(CONTEXT_HEADER)
    for record in records:
        block = render_file(record)
        if total + len(block) > max_length:
            parts.append(TRUNCATION_NOTICE)
            break
        parts.append(block)
        total += len(block)
    parts.append(CONTEXT_FOOTER)
    return "".join(parts)


def marker_overhead() -> int:
    """Upper bound on what the fixed markers add beyond the file budget."""
    return len(CONTEXT_HEADER) + len(TRUNCATION_NOTICE) + len(CONTEXT_FOOTER)
