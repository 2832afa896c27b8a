"""Main application frame: file actions, option toggles, editor, error line."""

from __future__ import annotations

import logging

import wx

from luau_format_gui.core.formatter import OPTION_LABELS
from luau_format_gui.core.session import FormatSession
from luau_format_gui.core.settings import AppSettings
from luau_format_gui.ui.file_pickers import FilePickers
from luau_format_gui.utils.accessibility import (
    announce_status,
    set_accessible_help,
    set_accessible_name,
)
from luau_format_gui.utils.constants import (
    APP_HEADING,
    APP_NAME,
    APP_VERSION,
    FRAME_INTERVAL_MS,
)

logger = logging.getLogger(__name__)


class MainFrame(wx.Frame):
    """Primary application window.

    Layout
    ------
    Top:    Heading, Open / Save buttons
    Middle: Option checkboxes, Reset editor button
    Bottom: Scrolling code editor, error line, status bar

    A ``wx.Timer`` acts as the frame clock: every tick polls the session
    for finished dialog operations and refreshes the widgets if anything
    changed.
    """

    def __init__(
        self,
        parent: wx.Window | None,
        session: FormatSession,
        settings: AppSettings,
    ) -> None:
        super().__init__(
            parent,
            title=f"{APP_NAME} v{APP_VERSION}",
            size=(760, 640),
            style=wx.DEFAULT_FRAME_STYLE | wx.TAB_TRAVERSAL,
        )
        set_accessible_name(self, APP_NAME)
        self.SetMinSize((320, 240))
        self.Centre()

        self._session = session
        self._settings = settings
        self._pickers = FilePickers(self, settings.general)
        self._checkboxes: dict[str, wx.CheckBox] = {}

        self._build_status_bar()
        self._build_ui()

        self.Bind(wx.EVT_CLOSE, self._on_close)

        self._frame_timer = wx.Timer(self)
        self.Bind(wx.EVT_TIMER, self._on_frame, self._frame_timer)
        self._frame_timer.Start(FRAME_INTERVAL_MS)

        self._refresh()
        announce_status(self, "Ready. Open a file to format it")
        logger.info("Main frame initialised")

    # =================================================================== #
    # Build                                                                 #
    # =================================================================== #

    def _build_status_bar(self) -> None:
        sb = self.CreateStatusBar(2)
        sb.SetStatusWidths([-3, -2])
        set_accessible_name(sb, "Status bar")
        sb.SetStatusText(self._session.tool_status, 1)

    def _build_ui(self) -> None:
        panel = wx.Panel(self)
        sizer = wx.BoxSizer(wx.VERTICAL)

        heading = wx.StaticText(panel, label=APP_HEADING)
        heading.SetFont(heading.GetFont().Bold().Larger())
        sizer.Add(heading, 0, wx.ALL, 8)

        # -- File actions --
        actions = wx.BoxSizer(wx.HORIZONTAL)
        self._open_btn = wx.Button(panel, label="Open file...")
        set_accessible_help(self._open_btn, "Choose a file to format")
        self._open_btn.Bind(wx.EVT_BUTTON, self._on_open)
        actions.Add(self._open_btn, 0, wx.RIGHT, 6)

        self._save_btn = wx.Button(panel, label="Save to file...")
        set_accessible_help(self._save_btn, "Save the editor contents to a file")
        self._save_btn.Bind(wx.EVT_BUTTON, self._on_save)
        actions.Add(self._save_btn, 0)
        sizer.Add(actions, 0, wx.LEFT | wx.RIGHT | wx.BOTTOM, 8)

        # -- Options --
        sizer.Add(wx.StaticText(panel, label="Options:"), 0, wx.LEFT | wx.RIGHT, 8)
        for name, label in OPTION_LABELS.items():
            cb = wx.CheckBox(panel, label=label)
            cb.SetValue(getattr(self._session.options, name))
            cb.Bind(wx.EVT_CHECKBOX, lambda evt, n=name: self._on_option(n, evt))
            self._checkboxes[name] = cb
            sizer.Add(cb, 0, wx.LEFT | wx.RIGHT | wx.TOP, 4)

        self._reset_btn = wx.Button(panel, label="Reset editor...")
        set_accessible_help(self._reset_btn, "Discard edits and restore the formatted output")
        self._reset_btn.Bind(wx.EVT_BUTTON, self._on_reset)
        sizer.Add(self._reset_btn, 0, wx.ALL, 8)

        # -- Editor --
        self._editor = wx.TextCtrl(
            panel,
            style=wx.TE_MULTILINE | wx.TE_DONTWRAP | wx.HSCROLL,
        )
        self._editor.SetFont(
            wx.Font(11, wx.FONTFAMILY_TELETYPE, wx.FONTSTYLE_NORMAL, wx.FONTWEIGHT_NORMAL)
        )
        set_accessible_name(self._editor, "Code editor")
        self._editor.Bind(wx.EVT_TEXT, self._on_editor_text)
        sizer.Add(self._editor, 1, wx.LEFT | wx.RIGHT | wx.EXPAND, 8)

        # -- Error line --
        self._error_label = wx.StaticText(panel, label="")
        self._error_label.SetForegroundColour(wx.Colour(200, 40, 40))
        set_accessible_name(self._error_label, "Error")
        sizer.Add(self._error_label, 0, wx.ALL | wx.EXPAND, 8)

        panel.SetSizer(sizer)
        self._panel = panel

    # =================================================================== #
    # Frame clock                                                           #
    # =================================================================== #

    def _on_frame(self, _event: wx.TimerEvent) -> None:
        if self._session.poll():
            self._refresh()

    def _refresh(self) -> None:
        """Push session state into the widgets."""
        session = self._session

        self._open_btn.Enable(not session.is_opening)
        self._save_btn.Enable(not session.is_saving)

        for name, cb in self._checkboxes.items():
            cb.SetValue(getattr(session.options, name))

        # ChangeValue does not emit EVT_TEXT, so edits are never echoed back
        if self._editor.GetValue() != session.editor_code:
            self._editor.ChangeValue(session.editor_code)

        error = session.visible_error
        self._error_label.SetLabel(error or "")
        self._error_label.Show(error is not None)

        if session.input_file is not None:
            announce_status(self, str(session.input_file))
        self._panel.Layout()

    # =================================================================== #
    # Handlers                                                              #
    # =================================================================== #

    def _on_open(self, _event: wx.CommandEvent) -> None:
        if self._session.request_open(self._pickers.pick_open):
            self._refresh()
            announce_status(self, "Choosing a file…")

    def _on_save(self, _event: wx.CommandEvent) -> None:
        default_name = self._settings.general.default_save_name
        if self._session.request_save(self._pickers.pick_save, default_name):
            self._refresh()
            announce_status(self, "Choosing where to save…")

    def _on_option(self, name: str, event: wx.CommandEvent) -> None:
        with wx.BusyCursor():
            self._session.set_option(name, event.IsChecked())
        self._refresh()

    def _on_reset(self, _event: wx.CommandEvent) -> None:
        self._session.reset_editor()
        self._refresh()

    def _on_editor_text(self, _event: wx.CommandEvent) -> None:
        self._session.editor_code = self._editor.GetValue()

    # =================================================================== #
    # Window close                                                          #
    # =================================================================== #

    def _on_close(self, _event: wx.CloseEvent) -> None:
        self._frame_timer.Stop()
        self._settings.formatter.update_from_options(self._session.options)
        self._settings.save()
        self.Destroy()
