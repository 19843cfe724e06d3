from __future__ import annotations

import threading
from collections.abc import Sequence

import pytest

from indent_print.adapters.char_sinks import MemoryCharSink
from indent_print.adapters.logging import MemoryLogSink
from indent_print.writer import IndentingWriter


class _FlakySink(MemoryCharSink):
    # Memory sink whose next write raises the configured error once.
    def __init__(self) -> None:
        super().__init__()
        self.fail_with: BaseException | None = None
        self.close_calls = 0
        self.fail_close = False

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc

    def write_char(self, char: str) -> None:
        self._maybe_fail()
        super().write_char(char)

    def write_chars(self, chars: Sequence[str], offset: int, length: int) -> None:
        self._maybe_fail()
        super().write_chars(chars, offset, length)

    def write_str(self, text: str, offset: int, length: int) -> None:
        self._maybe_fail()
        super().write_str(text, offset, length)

    def close(self) -> None:
        self.close_calls += 1
        if self.fail_close:
            raise OSError("close failed")
        super().close()


def test_write_failure_is_swallowed_and_sticky() -> None:
    # A failed write never raises; check_error stays true after later successful writes.
    sink = _FlakySink()
    writer = IndentingWriter(sink, "\n")
    sink.fail_with = OSError("disk full")
    writer.println("lost")
    assert writer.check_error() is True
    writer.println("ok")
    writer.flush()
    assert writer.check_error() is True
    assert sink.getvalue().endswith("ok\n")


def test_fresh_writer_reports_no_error() -> None:
    sink = MemoryCharSink()
    writer = IndentingWriter(sink, "\n")
    writer.println("x")
    assert writer.check_error() is False
    assert sink.flushes == 1


def test_check_error_flushes_to_surface_failures() -> None:
    # A failure raised by flush is picked up by check_error.
    class _FlushFails(MemoryCharSink):
        def flush(self) -> None:
            raise OSError("flush failed")

    writer = IndentingWriter(_FlushFails(), "\n")
    writer.print("x")
    assert writer.check_error() is True


def test_value_error_from_stream_counts_as_fault() -> None:
    # Encoding errors and closed-stream ValueErrors are sink failures too.
    sink = _FlakySink()
    writer = IndentingWriter(sink, "\n")
    sink.fail_with = UnicodeEncodeError("ascii", "é", 0, 1, "ordinal not in range")
    writer.print("é")
    assert writer.check_error() is True


def test_write_after_close_is_silent_fault() -> None:
    # Writes after close do nothing observable except setting the error flag.
    sink = MemoryCharSink()
    writer = IndentingWriter(sink, "\n")
    writer.println("a")
    writer.close()
    writer.println("b")
    writer.write_char("c")
    writer.flush()
    assert writer.closed is True
    assert writer.check_error() is True
    assert sink.getvalue() == "a\n"


def test_close_is_idempotent() -> None:
    # A second close neither touches the sink again nor records a fault.
    sink = _FlakySink()
    writer = IndentingWriter(sink, "\n")
    writer.close()
    writer.close()
    assert sink.close_calls == 1
    assert writer.check_error() is False


def test_close_failure_is_recorded() -> None:
    sink = _FlakySink()
    sink.fail_close = True
    writer = IndentingWriter(sink, "\n")
    writer.close()
    assert writer.closed is True
    assert writer.check_error() is True


def test_context_manager_closes_sink() -> None:
    sink = MemoryCharSink()
    with IndentingWriter(sink, "\n") as writer:
        writer.println("x")
    assert sink.closed is True
    assert writer.closed is True


def test_set_error_is_sticky() -> None:
    writer = IndentingWriter(MemoryCharSink(), "\n")
    writer.set_error()
    writer.println("fine")
    assert writer.check_error() is True


def test_interrupted_write_sets_cancellation_token() -> None:
    # InterruptedError is swallowed like other failures but forwarded to the caller's token.
    sink = _FlakySink()
    token = threading.Event()
    writer = IndentingWriter(sink, "\n", interrupted=token)
    sink.fail_with = InterruptedError("interrupted")
    writer.print("x")
    assert token.is_set()
    assert writer.check_error() is True


def test_interrupted_write_without_token_is_recorded() -> None:
    sink = _FlakySink()
    writer = IndentingWriter(sink, "\n")
    sink.fail_with = InterruptedError("interrupted")
    writer.println("x")
    assert writer.check_error() is True


def test_keyboard_interrupt_is_not_swallowed() -> None:
    # Cancellation signals outside the Exception hierarchy propagate to the caller.
    sink = _FlakySink()
    writer = IndentingWriter(sink, "\n")
    sink.fail_with = KeyboardInterrupt()
    with pytest.raises(KeyboardInterrupt):
        writer.print("x")


def test_programming_errors_in_sink_propagate() -> None:
    # Only I/O-style failures are recorded; other exceptions are bugs and surface.
    sink = _FlakySink()
    writer = IndentingWriter(sink, "\n")
    sink.fail_with = RuntimeError("bug")
    with pytest.raises(RuntimeError):
        writer.print("x")


def test_failed_prefix_is_retried_on_next_write() -> None:
    # When the prefix write fails the line is still considered unstarted.
    sink = _FlakySink()
    writer = IndentingWriter(sink, "\n")
    writer.indent()
    sink.fail_with = OSError("boom")
    writer.print("lost")
    writer.println("kept")
    assert sink.getvalue() == "  kept\n"
    assert writer.check_error() is True


def test_faults_and_close_are_logged() -> None:
    # Each recorded fault emits a structured warning; a clean close emits an info record.
    sink = _FlakySink()
    log = MemoryLogSink()
    writer = IndentingWriter(sink, "\n", log_sink=log)
    sink.fail_with = OSError("disk full")
    writer.println("x")
    writer.close()
    writer.print("after")
    levels = [(m.level, m.fields.get("operation")) for m in log.messages]
    assert levels == [("warning", "write"), ("info", None)]
    assert log.messages[0].fields["error"] == "disk full"
    assert writer.check_error() is True


def test_failed_close_is_not_logged_as_closed() -> None:
    # A close that fails yields only the failure warning, no "sink closed" record.
    sink = _FlakySink()
    sink.fail_close = True
    log = MemoryLogSink()
    writer = IndentingWriter(sink, "\n", log_sink=log)
    writer.close()
    assert [(m.level, m.message) for m in log.messages] == [("warning", "sink failure recorded")]
    assert log.messages[0].fields == {"operation": "close", "error": "close failed"}


def test_close_releases_owned_log_sink() -> None:
    # The writer closes a log sink that has a close method, exactly once.
    class _ClosingLog(MemoryLogSink):
        def __init__(self) -> None:
            super().__init__()
            self.close_calls = 0

        def close(self) -> None:
            self.close_calls += 1

    log = _ClosingLog()
    writer = IndentingWriter(MemoryCharSink(), "\n", log_sink=log)
    writer.close()
    writer.close()
    assert log.close_calls == 1


def test_concurrent_println_lines_are_not_interleaved() -> None:
    # println(value) is atomic: every output line is one complete, prefixed value.
    sink = MemoryCharSink()
    writer = IndentingWriter(sink, "\n")
    writer.indent()

    def _worker(tag: str) -> None:
        for i in range(200):
            writer.println(f"{tag}-{i}")

    threads = [threading.Thread(target=_worker, args=(tag,)) for tag in ("a", "b", "c", "d")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    lines = sink.getvalue().split("\n")
    assert lines[-1] == ""
    lines = lines[:-1]
    assert len(lines) == 800
    assert all(line.startswith("  ") and not line.startswith("   ") for line in lines)
    assert sorted(line.strip() for line in lines) == sorted(
        f"{tag}-{i}" for tag in ("a", "b", "c", "d") for i in range(200)
    )
