"""luau-format GUI: wx.App subclass and logging bootstrap."""

from __future__ import annotations

import gc
import logging
import sys

import wx

from luau_format_gui.core.session import FormatSession
from luau_format_gui.core.settings import AppSettings
from luau_format_gui.core.tool_acquisition import ToolHandle
from luau_format_gui.utils.constants import APP_NAME, DATA_DIR, LOG_PATH

logger = logging.getLogger(__name__)


def setup_logging(console_level: str = "INFO") -> None:
    """Configure file + console logging."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    fmt = logging.Formatter(
        "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(str(LOG_PATH), encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(getattr(logging, str(console_level).upper(), logging.INFO))
    ch.setFormatter(fmt)
    root.addHandler(ch)


class LuauFormatApp(wx.App):
    """Top-level wx application.

    Args:
        tool: Formatter resolved by the bootstrap before wx starts.
        settings: Loaded application settings.
    """

    def __init__(self, tool: ToolHandle, settings: AppSettings) -> None:
        # OnInit runs inside wx.App.__init__, so these must exist first
        self._tool = tool
        self._settings = settings
        super().__init__(redirect=False)

    def OnInit(self) -> bool:
        """Called by wxPython on application startup."""
        self.SetAppName(APP_NAME)

        # Import here to avoid circular imports with wx startup
        from luau_format_gui.ui.main_frame import MainFrame

        session = FormatSession(self._tool, options=self._settings.formatter.to_options())
        frame = MainFrame(None, session, self._settings)
        frame.Show()
        self.SetTopWindow(frame)
        return True

    def OnExit(self) -> int:
        """Clean-up on shutdown: flush and close the log handlers."""
        logger.info("Shutting down %s", APP_NAME)

        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            try:
                handler.close()
                root_logger.removeHandler(handler)
            except Exception:
                pass

        gc.collect()
        return 0
