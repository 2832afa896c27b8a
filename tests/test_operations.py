"""Tests for single-flight background operations."""

from __future__ import annotations

import threading
import time

from luau_format_gui.core.operations import (
    BackgroundOperation,
    Completion,
    OperationCancelled,
    OperationKind,
    OperationState,
)


def _wait_until_completed(op: BackgroundOperation, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while op.state is not OperationState.COMPLETED:
        assert time.monotonic() < deadline, "operation did not complete"
        time.sleep(0.01)


class TestLifecycle:
    """IDLE -> IN_FLIGHT -> COMPLETED -> IDLE."""

    def test_starts_idle(self) -> None:
        op = BackgroundOperation(OperationKind.OPEN_DIALOG)
        assert op.state is OperationState.IDLE
        assert op.is_in_flight is False
        assert op.poll() is None

    def test_result_is_delivered_once(self) -> None:
        gate = threading.Event()
        op = BackgroundOperation(OperationKind.OPEN_DIALOG)

        def target(_cancel: threading.Event, value: int) -> int:
            gate.wait(5)
            return value

        assert op.start(target, 42) is True
        assert op.state is OperationState.IN_FLIGHT
        assert op.poll() is None  # not finished yet, nothing to see

        gate.set()
        _wait_until_completed(op)
        completion = op.poll()
        assert completion == Completion(OperationKind.OPEN_DIALOG, value=42)
        assert completion.ok is True
        assert op.state is OperationState.IDLE
        assert op.poll() is None

    def test_thread_is_named_after_kind(self) -> None:
        op = BackgroundOperation(OperationKind.SAVE_DIALOG)
        op.start(lambda _cancel: None)
        assert op.thread is not None
        assert op.thread.name == "save-dialog"
        assert op.thread.daemon is True
        op.thread.join(5)

    def test_can_restart_after_poll(self) -> None:
        op = BackgroundOperation(OperationKind.OPEN_DIALOG)
        op.start(lambda _cancel: 1)
        assert op.wait(5).value == 1
        assert op.start(lambda _cancel: 2) is True
        assert op.wait(5).value == 2


class TestSingleFlight:
    """A second trigger while in flight is ignored."""

    def test_duplicate_start_spawns_no_thread(self) -> None:
        gate = threading.Event()
        calls: list[int] = []
        op = BackgroundOperation(OperationKind.OPEN_DIALOG)

        def target(_cancel: threading.Event, n: int) -> int:
            calls.append(n)
            gate.wait(5)
            return n

        assert op.start(target, 1) is True
        first_thread = op.thread
        assert op.start(target, 2) is False
        assert op.thread is first_thread

        gate.set()
        completion = op.wait(5)
        assert completion.value == 1
        assert calls == [1]

    def test_still_blocked_while_result_unconsumed(self) -> None:
        op = BackgroundOperation(OperationKind.SAVE_DIALOG)
        op.start(lambda _cancel: "done")
        _wait_until_completed(op)
        assert op.is_in_flight is True
        assert op.start(lambda _cancel: "again") is False


class TestFailures:
    """Errors and cancellation become terminal messages."""

    def test_exception_becomes_error(self) -> None:
        op = BackgroundOperation(OperationKind.SAVE_DIALOG)

        def target(_cancel: threading.Event) -> None:
            raise PermissionError("Permission denied")

        op.start(target)
        completion = op.wait(5)
        assert completion.ok is False
        assert completion.error == "Permission denied"
        assert op.state is OperationState.IDLE

    def test_exception_without_message_uses_class_name(self) -> None:
        op = BackgroundOperation(OperationKind.OPEN_DIALOG)

        def target(_cancel: threading.Event) -> None:
            raise RuntimeError()

        op.start(target)
        assert op.wait(5).error == "RuntimeError"

    def test_cancel_sets_event_seen_by_target(self) -> None:
        started = threading.Event()
        op = BackgroundOperation(OperationKind.TOOL_DOWNLOAD)

        def target(cancel: threading.Event) -> None:
            started.set()
            if cancel.wait(5):
                raise OperationCancelled()

        op.start(target)
        assert started.wait(5)
        op.cancel()
        completion = op.wait(5)
        assert completion.cancelled is True
        assert completion.ok is False

    def test_wait_times_out(self) -> None:
        gate = threading.Event()
        op = BackgroundOperation(OperationKind.TOOL_DOWNLOAD)
        op.start(lambda _cancel: gate.wait(5))
        assert op.wait(timeout=0.05) is None
        assert op.is_in_flight is True
        gate.set()
        assert op.wait(5) is not None
