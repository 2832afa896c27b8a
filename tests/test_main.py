"""Tests for the startup entry point."""

from __future__ import annotations

import sys
import types
from unittest.mock import MagicMock, patch

import pytest

from luau_format_gui.__main__ import main
from luau_format_gui.core.settings import AppSettings
from luau_format_gui.core.tool_acquisition import ToolAcquisitionError, ToolHandle


@pytest.fixture()
def fake_app_module():
    """Stand in for the wx application module so no window can be created."""
    module = types.ModuleType("luau_format_gui.app")
    module.LuauFormatApp = MagicMock(name="LuauFormatApp")
    module.setup_logging = MagicMock(name="setup_logging")
    with patch.dict(sys.modules, {"luau_format_gui.app": module}):
        yield module


class TestStartup:
    """Bootstrap before the main loop."""

    def test_missing_formatter_aborts_without_window(self, fake_app_module) -> None:
        with (
            patch.object(AppSettings, "load", return_value=AppSettings()),
            patch(
                "luau_format_gui.core.tool_acquisition.ensure_tool",
                side_effect=ToolAcquisitionError("invalid file at url x"),
            ),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == "luau-format-gui: invalid file at url x"
        fake_app_module.LuauFormatApp.assert_not_called()

    def test_resolved_formatter_starts_app(self, fake_app_module) -> None:
        settings = AppSettings()
        tool = ToolHandle(command="luau-format")
        with (
            patch.object(AppSettings, "load", return_value=settings),
            patch("luau_format_gui.core.tool_acquisition.ensure_tool", return_value=tool),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == 0
        fake_app_module.LuauFormatApp.assert_called_once_with(tool, settings)
        fake_app_module.LuauFormatApp.return_value.MainLoop.assert_called_once_with()
