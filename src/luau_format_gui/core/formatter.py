"""Formatter invocation via the external ``luau-format`` executable."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, fields
from pathlib import Path

from luau_format_gui.core.tool_acquisition import ToolHandle
from luau_format_gui.utils.platform_utils import no_window_flags

logger = logging.getLogger(__name__)


@dataclass
class FormatOptions:
    """Independent transformation toggles, in CLI flag order."""

    no_simplify: bool = False
    minify: bool = False
    lua_calls: bool = False
    solve_record_table: bool = False
    solve_list_table: bool = False

    def enabled_flags(self) -> list[str]:
        """Return the CLI flags for every enabled toggle, in declaration order."""
        return [OPTION_FLAGS[f.name] for f in fields(self) if getattr(self, f.name)]


OPTION_FLAGS: dict[str, str] = {
    "no_simplify": "--nosimplify",
    "minify": "--minify",
    "lua_calls": "--lua_calls",
    "solve_record_table": "--solve_record_table",
    "solve_list_table": "--solve_list_table",
}

OPTION_LABELS: dict[str, str] = {
    "no_simplify": "no simplify - disable AstSimplifier",
    "minify": "minify - minify code instead of beautify",
    "lua_calls": "lua calls - solve lua calls such as math.max(1, 4)",
    "solve_record_table": "solve record table - solve Luraph's function table",
    "solve_list_table": "solve list table - solve Luraph's number table",
}


@dataclass(frozen=True)
class FormatOutcome:
    """Result of one formatter run: formatted text or an error message."""

    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> FormatOutcome:
        return cls(text=text)

    @classmethod
    def failure(cls, message: str) -> FormatOutcome:
        return cls(error=message)


def build_arguments(input_path: str | Path, options: FormatOptions) -> list[str]:
    """Build the formatter argument list (without the executable).

    Args:
        input_path: Source file to format; always the first argument.
        options: Enabled toggles, appended as flags.

    Returns:
        ``[input_path, *flags]``.
    """
    return [str(input_path), *options.enabled_flags()]


def invoke(tool: ToolHandle, input_path: str | Path, options: FormatOptions) -> FormatOutcome:
    """Run the formatter to completion and capture its outcome.

    Blocks the calling thread for the lifetime of the process; no timeout
    is applied. Output is decoded with replacement characters so that
    invalid byte sequences never fail the run.

    Args:
        tool: Resolved formatter executable.
        input_path: Source file to format.
        options: Transformation toggles.

    Returns:
        ``FormatOutcome.success(stdout)`` on exit code zero, otherwise
        ``FormatOutcome.failure(stderr or launch error)``.
    """
    cmd = [tool.command, *build_arguments(input_path, options)]
    logger.info("Running formatter: %s", " ".join(cmd))

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            stdin=subprocess.DEVNULL,
            check=False,
            creationflags=no_window_flags(),
        )
    except OSError as exc:
        logger.error("Formatter failed to start: %s", exc)
        return FormatOutcome.failure(str(exc))

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        logger.warning("Formatter exited %d: %s", result.returncode, stderr.strip())
        return FormatOutcome.failure(stderr)

    return FormatOutcome.success(result.stdout.decode("utf-8", errors="replace"))
