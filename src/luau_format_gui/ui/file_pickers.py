"""Blocking native file pickers, callable from worker threads.

wx only allows windows to be created on the main thread, so each picker
schedules its ``wx.FileDialog`` with ``wx.CallAfter`` and blocks the
calling worker thread on a :class:`~concurrent.futures.Future` until the
user dismisses the dialog. The UI thread keeps running its event loop
(and frame timer) while the modal dialog is up.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path
from typing import TypeVar

import wx

from luau_format_gui.core.settings import GeneralSettings
from luau_format_gui.utils.accessibility import safe_call_after
from luau_format_gui.utils.constants import LUA_WILDCARD

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def run_on_ui_thread(func: Callable[..., _T], *args) -> _T:
    """Run *func* on the wx main thread and wait for its result.

    Must not be called from the main thread itself (it would deadlock).
    Exceptions raised by *func* are re-raised in the caller.
    """
    future: Future[_T] = Future()

    def _run() -> None:
        try:
            future.set_result(func(*args))
        except Exception as exc:
            future.set_exception(exc)

    safe_call_after(_run)
    return future.result()


class FilePickers:
    """Open/save pickers that remember the last directory used.

    Args:
        parent: Window the dialogs are modal to.
        settings: General settings holding ``last_directory``.
    """

    def __init__(self, parent: wx.Window, settings: GeneralSettings) -> None:
        self._parent = parent
        self._settings = settings

    # Called on worker threads
    def pick_open(self) -> Path | None:
        return run_on_ui_thread(self._show_open)

    def pick_save(self, default_name: str) -> Path | None:
        return run_on_ui_thread(self._show_save, default_name)

    # ------------------------------------------------------------------ #
    # UI thread                                                            #
    # ------------------------------------------------------------------ #

    def _show_open(self) -> Path | None:
        dlg = wx.FileDialog(
            self._parent,
            "Open file",
            defaultDir=self._settings.last_directory,
            wildcard=LUA_WILDCARD,
            style=wx.FD_OPEN | wx.FD_FILE_MUST_EXIST,
        )
        return self._show(dlg)

    def _show_save(self, default_name: str) -> Path | None:
        dlg = wx.FileDialog(
            self._parent,
            "Save to file",
            defaultDir=self._settings.last_directory,
            defaultFile=default_name,
            wildcard=LUA_WILDCARD,
            style=wx.FD_SAVE | wx.FD_OVERWRITE_PROMPT,
        )
        return self._show(dlg)

    def _show(self, dlg: wx.FileDialog) -> Path | None:
        try:
            if dlg.ShowModal() != wx.ID_OK:
                return None
            path = Path(dlg.GetPath())
        finally:
            dlg.Destroy()
        self._settings.last_directory = str(path.parent)
        return path
