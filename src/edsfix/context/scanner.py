from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..errors import DirectoryNotFound, FileUnreadable
from ..util.fs import read_text

log = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".css")

# Tooling and build output that never carries block source.
DEFAULT_EXCLUDED_DIRS: frozenset[str] = frozenset(
    {"node_modules", ".git", ".next", "dist", "build", ".cache", "coverage"}
)


@dataclass(frozen=True)
class FileRecord:
    path: str      # relative to the scan root, "/"-separated
    content: str


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    out: list[str] = []
    for ext in extensions:
        ext = str(ext).strip()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in out:
            out.append(ext)
    return tuple(out)


def scan_directory(
    root: str | Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
) -> list[FileRecord]:
    """Collect source files under `root`, depth first.

    Entries are visited in directory-listing order at every level, which is
    also the order the context assembler truncates in. Excluded directories
    are skipped by name wherever they appear. A file that cannot be read is
    logged and left out; a missing root raises DirectoryNotFound.
    """
    root_path = Path(root).expanduser()
    if not root_path.is_dir():
        raise DirectoryNotFound(str(root_path))

    exts = normalize_extensions(extensions)
    excluded = frozenset(exclude_dirs)
    records: list[FileRecord] = []
    seen: set[Path] = set()

    def _walk(current: Path) -> None:
        real = current.resolve()
        if real in seen:
            return
        seen.add(real)
        for name in os.listdir(current):
            full = current / name
            if full.is_dir():
                if name not in excluded:
                    _walk(full)
            elif full.is_file():
                if full.suffix not in exts:
                    continue
                rel = full.relative_to(root_path).as_posix()
                try:
                    content = read_text(full)
                except FileUnreadable as e:
                    log.warning("%s", e)
                    continue
                records.append(FileRecord(path=rel, content=content))

    _walk(root_path)
    log.debug("scanned %s: %d file(s)", root_path, len(records))
    return records
