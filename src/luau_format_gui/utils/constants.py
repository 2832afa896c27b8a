"""App-wide constants and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from platformdirs import user_cache_dir, user_data_dir

# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
APP_NAME: Final[str] = "luau-format"
APP_ID: Final[str] = "luau-format-gui"
APP_AUTHOR: Final[str] = "TechHog8984"
APP_VERSION: Final[str] = "0.1.0"
APP_HEADING: Final[str] = "luau-format by techhog"

# ---------------------------------------------------------------------------
# Formatter tool + GitHub releases
# ---------------------------------------------------------------------------
TOOL_NAME: Final[str] = "luau-format"
GITHUB_REPO_OWNER: Final[str] = "TechHog8984"
GITHUB_REPO_NAME: Final[str] = "luau-format"
RELEASE_DOWNLOAD_BASE: Final[str] = (
    f"https://github.com/{GITHUB_REPO_OWNER}/{GITHUB_REPO_NAME}/releases/latest/download"
)
WINDOWS_DOWNLOAD_URL: Final[str] = f"{RELEASE_DOWNLOAD_BASE}/{TOOL_NAME}.exe"

# GitHub answers a missing release asset with this exact plain-text body
NOT_FOUND_BODY: Final[bytes] = b"Not Found"

DEFAULT_DOWNLOAD_TIMEOUT: Final[float] = 120.0
PROBE_TIMEOUT: Final[float] = 10.0
DOWNLOAD_CHUNK_SIZE: Final[int] = 65536

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
DATA_DIR: Final[Path] = Path(user_data_dir(APP_ID, APP_AUTHOR))
# Created lazily by the bootstrap, only when a download is needed
TOOL_CACHE_DIR: Final[Path] = Path(user_cache_dir(APP_ID, APP_AUTHOR))
SETTINGS_PATH: Final[Path] = DATA_DIR / "settings.json"
LOG_PATH: Final[Path] = DATA_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)

# ---------------------------------------------------------------------------
# Editor / dialogs
# ---------------------------------------------------------------------------
DEFAULT_SAVE_NAME: Final[str] = "formatted.lua"
LUA_WILDCARD: Final[str] = "Luau / Lua files (*.luau;*.lua)|*.luau;*.lua|All files|*.*"
ERROR_PREFIX: Final[str] = "An error occured: "

# Timer interval for the UI poll loop (roughly 60 frames per second)
FRAME_INTERVAL_MS: Final[int] = 16
