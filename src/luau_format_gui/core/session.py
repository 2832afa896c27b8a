"""Formatting session: the per-frame driving logic behind the main window.

:class:`FormatSession` owns everything the window renders (option toggles,
the selected file, the editor buffer and the visible error) and the two
dialog operations. It never touches wx: pickers are injected as blocking
callables that run on the operations' worker threads, and the window calls
:meth:`FormatSession.poll` once per frame from its timer.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from luau_format_gui.core.formatter import (
    OPTION_FLAGS,
    FormatOptions,
    FormatOutcome,
    invoke,
)
from luau_format_gui.core.operations import (
    BackgroundOperation,
    Completion,
    OperationKind,
)
from luau_format_gui.core.tool_acquisition import ToolHandle
from luau_format_gui.utils.constants import DEFAULT_SAVE_NAME, ERROR_PREFIX

logger = logging.getLogger(__name__)

OpenPicker = Callable[[], Path | None]
SavePicker = Callable[[str], Path | None]
Invoker = Callable[[ToolHandle, Path, FormatOptions], FormatOutcome]


# ---------------------------------------------------------------------------
# Worker targets (run on background threads)
# ---------------------------------------------------------------------------


def _pick_input(_cancel: threading.Event, picker: OpenPicker) -> Path | None:
    return picker()


def _pick_output_and_write(
    _cancel: threading.Event,
    picker: SavePicker,
    default_name: str,
    code: str,
) -> Path | None:
    path = picker(default_name)
    if path is None:
        return None
    # Bytes keep the editor's line endings untouched
    Path(path).write_bytes(code.encode("utf-8"))
    logger.info("Saved %d characters to %s", len(code), path)
    return Path(path)


class FormatSession:
    """State and actions for one formatter window.

    Args:
        tool: Resolved formatter executable.
        options: Initial option toggles.
        invoker: Formatter runner, replaceable for tests.
    """

    def __init__(
        self,
        tool: ToolHandle,
        options: FormatOptions | None = None,
        invoker: Invoker = invoke,
    ) -> None:
        self._tool = tool
        self._invoker = invoker
        self.options: FormatOptions = options or FormatOptions()

        self.input_file: Path | None = None
        self.formatted_code: str = ""
        self.editor_code: str = ""
        self.error: str | None = None

        self._open_op = BackgroundOperation(OperationKind.OPEN_DIALOG)
        self._save_op = BackgroundOperation(OperationKind.SAVE_DIALOG)

    # ------------------------------------------------------------------ #
    # Read-only view state                                                 #
    # ------------------------------------------------------------------ #

    @property
    def tool(self) -> ToolHandle:
        return self._tool

    @property
    def is_opening(self) -> bool:
        return self._open_op.is_in_flight

    @property
    def is_saving(self) -> bool:
        return self._save_op.is_in_flight

    @property
    def open_operation(self) -> BackgroundOperation:
        return self._open_op

    @property
    def tool_status(self) -> str:
        """Status bar text naming the formatter in use."""
        suffix = " (downloaded this run)" if self._tool.downloaded else ""
        return f"Formatter: {self._tool.command}{suffix}"

    @property
    def visible_error(self) -> str | None:
        """The single-line error text shown under the editor, if any."""
        if self.error is None:
            return None
        return f"{ERROR_PREFIX}{self.error}"

    # ------------------------------------------------------------------ #
    # User actions                                                         #
    # ------------------------------------------------------------------ #

    def request_open(self, picker: OpenPicker) -> bool:
        """Show the open-file picker on a worker thread.

        Returns:
            False if an open dialog is already showing.
        """
        if self._open_op.is_in_flight:
            return False
        self.error = None
        return self._open_op.start(_pick_input, picker)

    def request_save(self, picker: SavePicker, default_name: str = DEFAULT_SAVE_NAME) -> bool:
        """Show the save picker and write the current editor text.

        The editor text is captured now; later edits are not saved.

        Returns:
            False if a save dialog is already showing.
        """
        if self._save_op.is_in_flight:
            return False
        self.error = None
        return self._save_op.start(_pick_output_and_write, picker, default_name, self.editor_code)

    def set_option(self, name: str, value: bool) -> FormatOutcome | None:
        """Change one toggle and re-run the formatter.

        Raises:
            KeyError: If *name* is not a known option.
        """
        if name not in OPTION_FLAGS:
            raise KeyError(name)
        setattr(self.options, name, bool(value))
        return self.run_formatter()

    def reset_editor(self) -> None:
        """Discard edits, restoring the last successfully formatted text."""
        self.editor_code = self.formatted_code

    def run_formatter(self) -> FormatOutcome | None:
        """Format the selected file synchronously; a no-op with no file.

        On success both buffers take the new text and any error clears.
        On failure the error is shown and both buffers are left alone.
        """
        if self.input_file is None:
            return None

        outcome = self._invoker(self._tool, self.input_file, self.options)
        if outcome.ok:
            self.formatted_code = outcome.text
            self.editor_code = self.formatted_code
            self.error = None
        else:
            self.error = outcome.error
        return outcome

    # ------------------------------------------------------------------ #
    # Per-frame poll                                                       #
    # ------------------------------------------------------------------ #

    def poll(self) -> bool:
        """Consume finished dialog operations; call once per frame.

        Returns:
            True if anything the window renders may have changed.
        """
        changed = False

        opened = self._open_op.poll()
        if opened is not None:
            changed = True
            self._on_open_complete(opened)

        saved = self._save_op.poll()
        if saved is not None:
            changed = True
            self._on_save_complete(saved)

        return changed

    def _on_open_complete(self, completion: Completion) -> None:
        if completion.error is not None:
            self.error = completion.error
            return
        if completion.value is None:
            logger.debug("Open dialog cancelled")
            return
        self.input_file = Path(completion.value)
        logger.info("Selected input: %s", self.input_file)
        self.run_formatter()

    def _on_save_complete(self, completion: Completion) -> None:
        # The file was already written on the worker thread
        if completion.error is not None:
            self.error = completion.error
