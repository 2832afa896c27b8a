"""Startup bootstrap that guarantees the ``luau-format`` executable exists.

Workflow
--------
1. ``probe()`` each candidate (configured path, ``luau-format`` on PATH,
   the cached download) by launching it with no input. The first one that
   starts wins and no network request is made.
2. Otherwise compute the release asset URL for this platform/architecture
   and make sure the per-user cache directory exists.
3. Stream the asset with **httpx** on a cancellable
   :class:`~luau_format_gui.core.operations.BackgroundOperation`. A body of
   exactly ``Not Found`` means no build exists for this architecture.
4. Write the bytes into the cache, mark them executable and hand back a
   :class:`ToolHandle`.

Every failure after the probe raises :class:`ToolAcquisitionError`; the
application cannot run without the formatter, so callers treat it as fatal.
"""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import httpx

from luau_format_gui.core.operations import (
    BackgroundOperation,
    Completion,
    OperationCancelled,
    OperationKind,
)
from luau_format_gui.utils.constants import (
    DEFAULT_DOWNLOAD_TIMEOUT,
    DOWNLOAD_CHUNK_SIZE,
    NOT_FOUND_BODY,
    PROBE_TIMEOUT,
    RELEASE_DOWNLOAD_BASE,
    TOOL_CACHE_DIR,
    TOOL_NAME,
    WINDOWS_DOWNLOAD_URL,
)
from luau_format_gui.utils.platform_utils import (
    IS_WINDOWS,
    make_executable,
    no_window_flags,
    normalize_arch,
)

logger = logging.getLogger(__name__)

# Granularity of the bootstrap wait loop so Ctrl+C is noticed promptly
_WAIT_SLICE_SECONDS: float = 0.5
_CANCEL_GRACE_SECONDS: float = 5.0


class ToolAcquisitionError(Exception):
    """Raised when the formatter cannot be found or downloaded."""


@dataclass(frozen=True)
class ToolHandle:
    """Resolved formatter executable, fixed for the life of the process.

    Attributes:
        command: Executable path, or the bare command name when found on PATH.
        downloaded: True if this run fetched the binary from GitHub.
    """

    command: str
    downloaded: bool = False


# ---------------------------------------------------------------------------
# Probing
# ---------------------------------------------------------------------------


def probe(command: str, timeout: float = PROBE_TIMEOUT) -> bool:
    """Check whether *command* can be launched.

    The exit status is irrelevant; the formatter prints usage and exits
    non-zero when given no arguments.

    Args:
        command: Executable name or path.
        timeout: Seconds before a launched-but-silent process is abandoned.

    Returns:
        True if the process started.
    """
    try:
        subprocess.run(
            [command],
            capture_output=True,
            stdin=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
            creationflags=no_window_flags(),
        )
    except subprocess.TimeoutExpired:
        # It launched; it just did not exit in time
        return True
    except OSError:
        return False
    return True


def tool_candidates(configured_path: str = "", cache_dir: Path = TOOL_CACHE_DIR) -> list[str]:
    """Return the probe order: configured path, PATH lookup, cached download."""
    candidates: list[str] = []
    if configured_path:
        candidates.append(configured_path)
    candidates.append(TOOL_NAME)
    candidates.append(str(cached_tool_path(cache_dir)))
    return candidates


def find_tool(candidates: Iterable[str]) -> ToolHandle | None:
    """Return a handle for the first candidate that launches, if any."""
    for candidate in candidates:
        if probe(candidate):
            logger.info("%s: found (%s)", TOOL_NAME, candidate)
            return ToolHandle(command=candidate)
        logger.debug("%s: not launchable at %s", TOOL_NAME, candidate)
    return None


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------


def download_url(windows: bool | None = None, arch: str | None = None) -> str:
    """Return the release asset URL for the current (or given) platform.

    Args:
        windows: Override Windows detection.
        arch: Override the normalised CPU architecture.
    """
    if IS_WINDOWS if windows is None else windows:
        return WINDOWS_DOWNLOAD_URL
    return f"{RELEASE_DOWNLOAD_BASE}/{TOOL_NAME}-{arch or normalize_arch()}"


def cached_tool_path(cache_dir: Path = TOOL_CACHE_DIR) -> Path:
    """Return where a downloaded formatter lives inside *cache_dir*."""
    return cache_dir / (f"{TOOL_NAME}.exe" if IS_WINDOWS else TOOL_NAME)


def fetch_release(
    cancel_event: threading.Event,
    url: str,
    timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
) -> bytes:
    """Stream the body at *url* into memory.

    Runs on the download worker thread. The cancel event is checked
    between chunks.

    Returns:
        The full response body. A ``Not Found`` body is returned as-is so
        the caller can report the unsupported architecture.

    Raises:
        OperationCancelled: If *cancel_event* was set mid-download.
        ToolAcquisitionError: On transport errors or other HTTP failures.
    """
    logger.info("Downloading %s from %s", TOOL_NAME, url)
    body = bytearray()
    try:
        with httpx.stream("GET", url, follow_redirects=True, timeout=timeout) as resp:
            total = int(resp.headers.get("content-length", 0) or 0)
            next_report = 1024 * 1024
            for chunk in resp.iter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if cancel_event.is_set():
                    raise OperationCancelled(url)
                body.extend(chunk)
                if len(body) >= next_report:
                    logger.info(
                        "Downloaded %.1f / %.1f MB",
                        len(body) / (1024 * 1024),
                        total / (1024 * 1024),
                    )
                    next_report += 1024 * 1024
            status = resp.status_code
    except httpx.HTTPError as exc:
        raise ToolAcquisitionError(f"failed to make request to {url}: {exc}") from exc

    data = bytes(body)
    if status >= 400 and data != NOT_FOUND_BODY:
        raise ToolAcquisitionError(f"request to {url} failed with HTTP {status}")
    return data


def install_tool(body: bytes, dest: Path) -> Path:
    """Persist the downloaded bytes at *dest* and make them executable.

    The bytes land in a sibling ``.part`` file first so a crash never
    leaves a truncated binary behind at *dest*.

    Raises:
        ToolAcquisitionError: On any I/O failure.
    """
    part = dest.with_name(dest.name + ".part")
    try:
        part.write_bytes(body)
        os.replace(part, dest)
        make_executable(dest)
    except OSError as exc:
        raise ToolAcquisitionError(f"failed to write to {dest}: {exc}") from exc
    return dest


def _prepare_cache_dir(cache_dir: Path) -> None:
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ToolAcquisitionError(f"failed to create dir {cache_dir}: {exc}") from exc


def _wait_for_download(operation: BackgroundOperation) -> Completion:
    try:
        while True:
            completion = operation.wait(timeout=_WAIT_SLICE_SECONDS)
            if completion is not None:
                return completion
    except KeyboardInterrupt:
        logger.warning("Interrupted; cancelling %s download", TOOL_NAME)
        operation.cancel()
        operation.wait(timeout=_CANCEL_GRACE_SECONDS)
        raise ToolAcquisitionError(f"download of {TOOL_NAME} was cancelled") from None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def ensure_tool(
    configured_path: str = "",
    cache_dir: Path = TOOL_CACHE_DIR,
    timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
) -> ToolHandle:
    """Resolve the formatter, downloading it once if nothing launches.

    Args:
        configured_path: Optional user-configured executable, probed first.
        cache_dir: Per-user cache directory for downloaded binaries.
        timeout: httpx timeout for the download.

    Returns:
        The resolved :class:`ToolHandle`.

    Raises:
        ToolAcquisitionError: If the formatter is unavailable and the
            download fails, is cancelled or has no build for this platform.
    """
    handle = find_tool(tool_candidates(configured_path, cache_dir))
    if handle is not None:
        return handle

    logger.info("%s: NOT found, downloading", TOOL_NAME)
    url = download_url()
    _prepare_cache_dir(cache_dir)
    dest = cached_tool_path(cache_dir)

    operation = BackgroundOperation(OperationKind.TOOL_DOWNLOAD)
    operation.start(fetch_release, url, timeout)
    completion = _wait_for_download(operation)

    if completion.cancelled:
        raise ToolAcquisitionError(f"download of {TOOL_NAME} was cancelled")
    if completion.error is not None:
        raise ToolAcquisitionError(completion.error)

    body: bytes = completion.value
    if body == NOT_FOUND_BODY:
        raise ToolAcquisitionError(
            f"invalid file at url {url}! is your architecture supported?"
        )

    install_tool(body, dest)
    logger.info("Successfully downloaded %s from latest GitHub release", TOOL_NAME)
    return ToolHandle(command=str(dest), downloaded=True)
