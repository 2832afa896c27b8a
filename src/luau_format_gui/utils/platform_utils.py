"""Cross-platform utility helpers.

Normalises CPU architecture names to the suffixes used by the formatter's
release assets and hides the Windows-only process flags.
"""

from __future__ import annotations

import logging
import os
import platform
import stat
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Platform detection
# ---------------------------------------------------------------------------

IS_WINDOWS: bool = sys.platform == "win32"

# platform.machine() spellings -> release asset suffixes
_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "x86": "x86",
    "armv6l": "arm",
    "armv7l": "arm",
    "arm": "arm",
}


def normalize_arch(machine: str | None = None) -> str:
    """Return the release-asset architecture name for *machine*.

    Args:
        machine: Raw machine string. Defaults to ``platform.machine()``.

    Returns:
        One of ``x86_64``, ``aarch64``, ``x86``, ``arm``, or the lowercased
        input when it is not a known alias.
    """
    raw = (machine if machine is not None else platform.machine()).strip().lower()
    return _ARCH_ALIASES.get(raw, raw)


def no_window_flags() -> int:
    """Return ``creationflags`` that keep console windows hidden on Windows."""
    return subprocess.CREATE_NO_WINDOW if IS_WINDOWS else 0  # type: ignore[attr-defined]


def make_executable(path: str | Path) -> None:
    """Add the execute bits to *path* on POSIX systems.

    Args:
        path: File to mark executable. A no-op on Windows.
    """
    if IS_WINDOWS:
        return
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.debug("Marked executable: %s", path)
