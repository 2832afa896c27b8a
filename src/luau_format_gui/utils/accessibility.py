"""Accessibility helpers for WXPython controls."""

from __future__ import annotations

import logging

import wx

logger = logging.getLogger(__name__)


def set_accessible_name(ctrl: wx.Window, name: str) -> None:
    """Set the accessible name on a WXPython control.

    Args:
        ctrl: The wx control to label.
        name: The accessible name string for screen readers.
    """
    ctrl.SetName(name)


def set_accessible_help(ctrl: wx.Window, text: str) -> None:
    """Set help text that screen readers can announce.

    Args:
        ctrl: The wx control.
        text: Descriptive help text.
    """
    ctrl.SetHelpText(text)


def announce_status(frame: wx.Frame, message: str, field: int = 0) -> None:
    """Update the status bar text, which screen readers pick up.

    Args:
        frame: The frame containing the status bar.
        message: Text to display and announce.
        field: Status bar field index (default 0).
    """
    status_bar = frame.GetStatusBar()
    if status_bar:
        status_bar.SetStatusText(message, field)


def safe_call_after(func, *args, **kwargs) -> None:
    """Thread-safe wrapper to schedule a callable on the main UI thread.

    Args:
        func: Callable to invoke on the main thread.
        *args: Positional arguments for func.
        **kwargs: Keyword arguments for func.
    """
    wx.CallAfter(func, *args, **kwargs)
