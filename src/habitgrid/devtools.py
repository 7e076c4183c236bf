"""Console diagnostics for developers, printed only in dev mode."""

from __future__ import annotations

import sys
import traceback
from typing import Any, Mapping, Optional

from .config import BaseConfig


def dev_log(
    config: Optional[BaseConfig],
    message: str,
    *,
    exc: Optional[BaseException] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> bool:
    """Print ``[DEV] message (key=value ...)`` and return whether it was shown.

    The traceback for ``exc`` goes to stderr, away from the one-line summaries.
    """

    if config is None or not config.DEV_MODE:
        return False

    fields = " ".join(f"{key}={value}" for key, value in (context or {}).items())
    print(f"[DEV] {message} ({fields})" if fields else f"[DEV] {message}")
    if exc is not None:
        sys.stderr.write("".join(traceback.format_exception(exc)))
    return True
