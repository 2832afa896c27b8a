"""Tests for platform helpers and app constants."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from luau_format_gui.utils import platform_utils
from luau_format_gui.utils.constants import (
    APP_VERSION,
    ERROR_PREFIX,
    NOT_FOUND_BODY,
    RELEASE_DOWNLOAD_BASE,
)
from luau_format_gui.utils.platform_utils import make_executable, normalize_arch


class TestNormalizeArch:
    """platform.machine() spellings map to release suffixes."""

    @pytest.mark.parametrize(
        ("machine", "expected"),
        [
            ("x86_64", "x86_64"),
            ("AMD64", "x86_64"),
            ("arm64", "aarch64"),
            ("aarch64", "aarch64"),
            ("i686", "x86"),
            ("armv7l", "arm"),
            ("riscv64", "riscv64"),
        ],
    )
    def test_aliases(self, machine: str, expected: str) -> None:
        assert normalize_arch(machine) == expected

    def test_defaults_to_platform_machine(self) -> None:
        with patch.object(platform_utils.platform, "machine", return_value="AMD64"):
            assert normalize_arch() == "x86_64"


class TestMakeExecutable:
    """Execute bits on downloaded binaries."""

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
    def test_sets_execute_bit(self, tmp_path: Path) -> None:
        f = tmp_path / "tool"
        f.write_bytes(b"x")
        f.chmod(0o644)
        make_executable(f)
        assert os.access(f, os.X_OK)

    def test_noop_on_windows(self, tmp_path: Path) -> None:
        with patch.object(platform_utils, "IS_WINDOWS", True):
            make_executable(tmp_path / "does-not-exist.exe")


class TestConstants:
    """App identity and wire constants."""

    def test_app_version_format(self) -> None:
        parts = APP_VERSION.split(".")
        assert len(parts) == 3
        assert all(p.isdigit() for p in parts)

    def test_not_found_sentinel(self) -> None:
        assert NOT_FOUND_BODY == b"Not Found"

    def test_error_prefix_spelling(self) -> None:
        assert ERROR_PREFIX == "An error occured: "

    def test_release_base(self) -> None:
        assert RELEASE_DOWNLOAD_BASE.startswith("https://github.com/TechHog8984/luau-format/")
