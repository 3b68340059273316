from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from .models import BehaviorConfig
from ..context.scanner import normalize_extensions

APP_NAME = "edsfix"

log = logging.getLogger(__name__)


def _candidate_paths(cwd: Path) -> list[Path]:
    # project-level (higher priority)
    return [
        cwd / ".edsfix.json",
        cwd / "edsfix.json",
    ]


def _global_candidate_paths() -> list[Path]:
    cfg_dir = Path(user_config_dir(APP_NAME))
    return [cfg_dir / "edsfix.json"]


def _load_json(p: Path) -> dict[str, Any] | None:
    try:
        obj = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        log.warning("ignoring unreadable config %s: %s", p, e)
        return None
    if isinstance(obj, dict):
        return obj
    log.warning("ignoring config %s: top level must be an object", p)
    return None


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge_dicts(out[k], v)  # type: ignore
        else:
            out[k] = v
    return out


def _str_list(v: Any) -> list[str] | None:
    if isinstance(v, list) and all(isinstance(x, str) for x in v):
        return [x for x in v if x.strip()]
    return None


def load_behavior_config(*, cwd: Path, explicit_path: Path | None = None) -> BehaviorConfig:
    """Load behavior config.

    Merge order: global < project < explicit_path. Relative blocks_root is
    taken relative to cwd.
    """
    merged: dict[str, Any] = {}
    loaded_from: Path | None = None

    for p in _global_candidate_paths():
        if p.exists() and p.is_file():
            obj = _load_json(p)
            if obj is not None:
                merged = _merge_dicts(merged, obj)
                loaded_from = p

    for p in _candidate_paths(cwd):
        if p.exists() and p.is_file():
            obj = _load_json(p)
            if obj is not None:
                merged = _merge_dicts(merged, obj)
                loaded_from = p
                break  # first match wins for project-level

    if explicit_path is not None:
        p = explicit_path.expanduser().resolve()
        if p.exists() and p.is_file():
            obj = _load_json(p)
            if obj is not None:
                merged = _merge_dicts(merged, obj)
                loaded_from = p
        else:
            log.warning("behavior config not found: %s", p)

    cfg = BehaviorConfig()
    cfg.loaded_from = loaded_from

    root = merged.get("blocks_root")
    if isinstance(root, str) and root.strip():
        cfg.blocks_root = Path(root.strip())
    cfg.blocks_root = (cwd / cfg.blocks_root.expanduser()).resolve()

    exts = _str_list(merged.get("extensions"))
    if exts:
        cfg.extensions = normalize_extensions(exts)

    excl = _str_list(merged.get("exclude_dirs"))
    if excl is not None:
        cfg.exclude_dirs = frozenset(excl)

    mcc = merged.get("max_context_chars")
    if isinstance(mcc, int) and not isinstance(mcc, bool) and mcc > 0:
        cfg.max_context_chars = mcc

    for key in ("match_system_prompt", "fix_system_prompt"):
        v = merged.get(key)
        if isinstance(v, str) and v.strip():
            setattr(cfg, key, v)

    return cfg
