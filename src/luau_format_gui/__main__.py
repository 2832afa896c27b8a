"""Entry point for the luau-format GUI."""

import logging
import sys

logger = logging.getLogger("luau_format_gui")


def main() -> None:
    """Resolve the formatter, then launch the application window."""
    from luau_format_gui.app import LuauFormatApp, setup_logging
    from luau_format_gui.core.settings import AppSettings
    from luau_format_gui.core.tool_acquisition import ToolAcquisitionError, ensure_tool
    from luau_format_gui.utils.constants import APP_ID

    settings = AppSettings.load()
    setup_logging(settings.general.log_level)

    # The formatter is a hard dependency: no window is shown without it
    try:
        tool = ensure_tool(
            configured_path=settings.formatter.tool_path,
            timeout=settings.bootstrap.download_timeout,
        )
    except ToolAcquisitionError as exc:
        logger.critical("Cannot start: %s", exc)
        sys.exit(f"{APP_ID}: {exc}")

    app = LuauFormatApp(tool, settings)
    app.MainLoop()

    # Dialog worker threads are daemons; do not wait for them
    sys.exit(0)


if __name__ == "__main__":
    main()
