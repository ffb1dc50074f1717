from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Protocol

from microlisp.config import get_prelude_root, resolve_source_path

logger = logging.getLogger(__name__)

CORE_PRELUDE = 'core.mlisp'


class _HasEvalPrelude(Protocol):
    def eval_prelude(self, code: str) -> None: ...


def resolve_prelude() -> Optional[Path]:
    candidate = get_prelude_root() / CORE_PRELUDE
    return candidate if candidate.is_file() else None


def load_prelude(itp: _HasEvalPrelude) -> bool:
    """Evaluate the core prelude into ``itp``; False when no prelude is installed."""
    path = resolve_prelude()
    if path is None:
        logger.debug("no prelude found under %s", get_prelude_root())
        return False
    logger.debug("loading prelude %s", path)
    itp.eval_prelude(path.read_text(encoding='utf-8'))
    return True


def load_source(itp: _HasEvalPrelude, name: str) -> Path:
    """Evaluate a source file found directly or on MICROLISP_LOAD_PATH."""
    path = resolve_source_path(name)
    if path is None:
        raise FileNotFoundError(f"Cannot find '{name}' in MICROLISP_LOAD_PATH")
    logger.debug("loading %s", path)
    itp.eval_prelude(path.read_text(encoding='utf-8'))
    return path
