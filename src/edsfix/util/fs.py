from __future__ import annotations
from pathlib import Path

from ..errors import FileUnreadable

class FsError(RuntimeError):
    pass

def resolve_within(root: Path, path_str: str) -> Path:
    """Resolve `path_str` against `root`, refusing anything that lands outside it."""
    root = root.expanduser().resolve()
    p = Path(path_str)
    if not p.is_absolute():
        p = (root / p).resolve()
    else:
        p = p.resolve()
    try:
        p.relative_to(root)
    except ValueError:
        raise FsError(f"Path escapes blocks root: {path_str}")
    return p

def resolve_child(root: Path, name: str) -> Path:
    """Resolve a single directory name directly under `root`.

    Names that resolve to the root itself ('.', 'hero/..') or that span
    several components ('hero/sub') are refused.
    """
    p = resolve_within(root, name)
    parts = Path(name).parts
    if len(parts) != 1 or parts[0] in (".", "..") or p == root.expanduser().resolve():
        raise FsError(f"Not a block directory name: {name!r}")
    return p

def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileUnreadable(str(path), str(e)) from e
