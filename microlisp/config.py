from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


# Resolve installation dir (microlisp package directory)
_MICROLISP_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_DIR = _MICROLISP_DIR / 'prelude'
_DEFAULT_LOAD_DIRS = [Path('.')]


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def get_prelude_root() -> Path:
    roots = paths_from_env('MICROLISP_PRELUDE_PATH', [_DEFAULT_PRELUDE_DIR])
    # treat as single directory; if a file path is set, return its parent
    p = roots[0]
    return p if p.is_dir() else p.parent


def get_load_roots() -> List[Path]:
    return paths_from_env('MICROLISP_LOAD_PATH', _DEFAULT_LOAD_DIRS)


def resolve_source_path(name: str) -> Optional[Path]:
    """Find `name` as given, or relative to each MICROLISP_LOAD_PATH root."""
    p = Path(name)
    if p.is_absolute() or p.is_file():
        return p if p.is_file() else None
    for root in get_load_roots():
        candidate = root / p
        if candidate.is_file():
            return candidate
    return None


def get_log_level() -> int:
    """Log level from MICROLISP_LOG_LEVEL; defaults to WARNING."""
    raw = os.environ.get('MICROLISP_LOG_LEVEL', '').upper()
    if raw:
        level = getattr(logging, raw, None)
        if isinstance(level, int):
            return level
    return logging.WARNING


DEFAULT_RECURSION_LIMIT = 10000


def get_recursion_limit() -> int:
    """Python recursion limit; MICROLISP_RECURSION_LIMIT overrides.

    Each non-tail MicroLisp call costs several Python frames (about seven), so
    the default allows non-tail recursion roughly a thousand calls deep.
    Tail calls are trampolined and do not count against it.
    """
    raw = os.environ.get('MICROLISP_RECURSION_LIMIT')
    if not raw:
        return DEFAULT_RECURSION_LIMIT
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_RECURSION_LIMIT
