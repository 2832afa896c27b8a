"""Persistent application settings backed by a JSON file.

All user-configurable options are stored and retrieved through
:class:`AppSettings`. Values are saved to ``DATA_DIR/settings.json``
when the main window closes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from luau_format_gui.core.formatter import FormatOptions
from luau_format_gui.utils.constants import (
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_SAVE_NAME,
    SETTINGS_PATH,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------
# Nested option groups
# -----------------------------------------------------------------------


@dataclass
class GeneralSettings:
    """General / behaviour preferences."""

    last_directory: str = ""
    default_save_name: str = DEFAULT_SAVE_NAME
    log_level: str = "INFO"  # DEBUG | INFO | WARNING | ERROR


@dataclass
class FormatterSettings:
    """Formatter executable override and remembered option toggles."""

    tool_path: str = ""  # probed first; then PATH, then the download cache
    no_simplify: bool = False
    minify: bool = False
    lua_calls: bool = False
    solve_record_table: bool = False
    solve_list_table: bool = False

    def to_options(self) -> FormatOptions:
        """Build the FormatOptions these settings describe."""
        return FormatOptions(
            no_simplify=self.no_simplify,
            minify=self.minify,
            lua_calls=self.lua_calls,
            solve_record_table=self.solve_record_table,
            solve_list_table=self.solve_list_table,
        )

    def update_from_options(self, options: FormatOptions) -> None:
        """Remember the toggles from *options*."""
        for name, value in asdict(options).items():
            setattr(self, name, value)


@dataclass
class BootstrapSettings:
    """First-run download behaviour."""

    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT


@dataclass
class AppSettings:
    """Root container for all application settings."""

    general: GeneralSettings = field(default_factory=GeneralSettings)
    formatter: FormatterSettings = field(default_factory=FormatterSettings)
    bootstrap: BootstrapSettings = field(default_factory=BootstrapSettings)

    # ------------------------------------------------------------------ #
    # Persistence                                                          #
    # ------------------------------------------------------------------ #

    def save(self, path: Path = SETTINGS_PATH) -> None:
        """Persist settings to disk as JSON."""
        try:
            path.write_text(
                json.dumps(asdict(self), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            logger.info("Settings saved to %s", path)
        except Exception as exc:
            logger.error("Failed to save settings: %s", exc)

    @classmethod
    def load(cls, path: Path = SETTINGS_PATH) -> AppSettings:
        """Load settings from disk, falling back to defaults.

        Returns:
            Populated AppSettings instance.
        """
        if not path.exists():
            return cls()
        try:
            raw = json.loads(path.read_text("utf-8"))
            return cls._from_dict(raw)
        except Exception as exc:
            logger.warning("Failed to load settings, using defaults: %s", exc)
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> AppSettings:
        """Reconstruct from a JSON-compatible dict.

        Unknown keys are silently ignored so that upgrading from an
        older settings file always works.
        """

        def _safe(
            dc_cls: type[Any],
            section: dict[str, Any] | None,
        ) -> Any:
            if not section:
                return dc_cls()
            valid = {f.name for f in dc_cls.__dataclass_fields__.values()}
            return dc_cls(**{k: v for k, v in section.items() if k in valid})

        return cls(
            general=_safe(GeneralSettings, data.get("general")),
            formatter=_safe(FormatterSettings, data.get("formatter")),
            bootstrap=_safe(BootstrapSettings, data.get("bootstrap")),
        )
