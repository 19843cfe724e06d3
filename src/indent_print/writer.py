from __future__ import annotations

import os
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from indent_print.adapters.char_sinks import as_char_sink
from indent_print.domain.logging import LogMessage
from indent_print.domain.text import to_text
from indent_print.ports.char_sink import CharSink
from indent_print.ports.log_sink import LogSink

# Each depth level indents by this many spaces.
INDENT_WIDTH = 2

_NO_VALUE: Any = object()


class SinkClosedError(OSError):
    # Raised internally when an operation reaches a released sink; recorded as a fault.
    def __init__(self) -> None:
        super().__init__("Stream closed")


class IndentingWriter:
    # Lazily indents each new line by 2*depth spaces; sink failures only set a sticky flag.
    # An InterruptedError from the sink also sets the optional `interrupted` event.

    def __init__(
        self,
        sink: CharSink | Any,
        line_separator: str | None = None,
        *,
        log_sink: LogSink | None = None,
        interrupted: threading.Event | None = None,
    ) -> None:
        if sink is None:
            raise ValueError("IndentingWriter requires a sink")
        if line_separator is None:
            line_separator = os.linesep
        if not line_separator:
            raise ValueError("line_separator must be a non-empty string")
        self._sink: CharSink | None = as_char_sink(sink)
        self._line_separator = line_separator
        self._log_sink = log_sink
        self._interrupted = interrupted
        self._lock = threading.RLock()
        self._depth = 0
        self._column = 0
        self._faulted = False

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def column(self) -> int:
        return self._column

    @property
    def line_separator(self) -> str:
        return self._line_separator

    @property
    def closed(self) -> bool:
        return self._sink is None

    # Indent control

    def indent(self) -> None:
        with self._lock:
            self._depth += 1

    def unindent(self) -> None:
        with self._lock:
            if self._depth > 0:
                self._depth -= 1

    @contextmanager
    def indented(self) -> Iterator[IndentingWriter]:
        self.indent()
        try:
            yield self
        finally:
            self.unindent()

    # Writing

    def write_char(self, char: str | int) -> None:
        if isinstance(char, int):
            char = chr(char)
        if len(char) != 1:
            raise ValueError(f"write_char expects a single character, got {len(char)}")
        with self._lock, self._recording_faults("write"):
            sink = self._begin_content()
            sink.write_char(char)
            self._column += 1

    def write(self, data: str | int | Sequence[str], offset: int = 0, length: int | None = None) -> None:
        # data may be a str, a code point, or a sequence of 1-char strings; bad ranges raise IndexError.
        if isinstance(data, int):
            self.write_char(data)
            return
        length = _checked_range(len(data), offset, length)
        with self._lock, self._recording_faults("write"):
            sink = self._begin_content()
            if isinstance(data, str):
                sink.write_str(data, offset, length)
            else:
                sink.write_chars(data, offset, length)
            self._column += length

    def write_line(self) -> None:
        # The separator bypasses the prefix: an empty line never carries indentation.
        with self._lock, self._recording_faults("write_line"):
            sink = self._ensure_open()
            sink.write_str(self._line_separator, 0, len(self._line_separator))
            self._column = 0

    def print(self, value: object) -> None:
        self.write(to_text(value))

    def println(self, value: object = _NO_VALUE) -> None:
        with self._lock:
            if value is not _NO_VALUE:
                self.print(value)
            self.write_line()

    # Lifecycle and error state

    def flush(self) -> None:
        with self._lock, self._recording_faults("flush"):
            self._ensure_open().flush()

    def check_error(self) -> bool:
        # Flushes first; the flag is cumulative and never resets.
        with self._lock:
            if self._sink is not None:
                self.flush()
            return self._faulted

    def set_error(self) -> None:
        with self._lock:
            self._faulted = True

    def close(self) -> None:
        with self._lock:
            if self._sink is None:
                return
            sink, self._sink = self._sink, None
            with self._recording_faults("close"):
                sink.close()
                self._log("info", "sink closed")
            # The writer owns its log sink; later faults are no longer logged.
            log_sink, self._log_sink = self._log_sink, None
            close = getattr(log_sink, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> IndentingWriter:
        return self

    def __exit__(self, et: object, ev: object, tb: object) -> None:
        self.close()

    # Internals; callers hold self._lock.

    def _ensure_open(self) -> CharSink:
        if self._sink is None:
            raise SinkClosedError()
        return self._sink

    def _begin_content(self) -> CharSink:
        sink = self._ensure_open()
        if self._column == 0:
            width = INDENT_WIDTH * self._depth
            sink.write_str(" " * width, 0, width)
            self._column = width
        return sink

    @contextmanager
    def _recording_faults(self, operation: str) -> Iterator[None]:
        try:
            yield
        except InterruptedError as exc:
            self._record_fault(operation, exc)
            if self._interrupted is not None:
                self._interrupted.set()
        except (OSError, ValueError) as exc:
            # ValueError covers encoding errors and writes to an already-closed stream.
            self._record_fault(operation, exc)

    def _record_fault(self, operation: str, exc: BaseException) -> None:
        self._faulted = True
        self._log("warning", "sink failure recorded", operation=operation, error=str(exc) or type(exc).__name__)

    def _log(self, level: str, message: str, **fields: object) -> None:
        if self._log_sink is not None:
            self._log_sink.emit(LogMessage(level=level, message=message, fields=fields))


def _checked_range(size: int, offset: int, length: int | None) -> int:
    # Validate offset/length against a buffer of ``size`` items; return the effective length.
    if length is None:
        length = size - offset
    if offset < 0 or length < 0 or offset + length > size:
        raise IndexError(f"range [{offset}, {offset}+{length}) out of bounds for size {size}")
    return length
