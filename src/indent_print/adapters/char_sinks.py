from __future__ import annotations

import io
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from indent_print.adapters.contracts import adapter
from indent_print.ports.char_sink import CharSink

SINK_KIND = "char_sink"


@dataclass
class TextIOCharSink:
    # CharSink over any text stream; the stream is closed with the sink unless told otherwise.
    stream: TextIO
    close_stream: bool = True

    def write_char(self, char: str) -> None:
        self.stream.write(char)

    def write_chars(self, chars: Sequence[str], offset: int, length: int) -> None:
        self.stream.write("".join(chars[offset : offset + length]))

    def write_str(self, text: str, offset: int, length: int) -> None:
        self.stream.write(text[offset : offset + length])

    def flush(self) -> None:
        self.stream.flush()

    def close(self) -> None:
        if self.close_stream:
            self.stream.close()
        else:
            self.stream.flush()


@dataclass
class FileCharSink:
    # File-backed CharSink: opens lazily, optionally commits through a temp file on close.
    path: Path
    encoding: str = "utf-8"
    atomic_replace: bool = False
    _handle: TextIO | None = field(default=None, init=False, repr=False)
    _temp_path: Path | None = field(default=None, init=False, repr=False)

    def write_char(self, char: str) -> None:
        self._stream().write(char)

    def write_chars(self, chars: Sequence[str], offset: int, length: int) -> None:
        self._stream().write("".join(chars[offset : offset + length]))

    def write_str(self, text: str, offset: int, length: int) -> None:
        self._stream().write(text[offset : offset + length])

    def flush(self) -> None:
        if self._handle is not None:
            self._handle.flush()

    def close(self) -> None:
        # Close is idempotent; a sink that never wrote leaves no file behind.
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        temp_path, self._temp_path = self._temp_path, None
        flushed = False
        try:
            handle.flush()
            flushed = True
        finally:
            handle.close()
            # A temp file that could not be flushed is discarded, never committed.
            if temp_path is not None and not flushed:
                temp_path.unlink(missing_ok=True)

        if self.atomic_replace and temp_path is not None:
            # Atomic replace commits the temp file to the final path.
            temp_path.replace(self.path)

    def _stream(self) -> TextIO:
        # Open lazily so construction does not touch filesystem.
        if self._handle is None:
            self._open()
        assert self._handle is not None
        return self._handle

    def _open(self) -> None:
        if self.atomic_replace:
            self._temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            self._handle = self._temp_path.open("w", encoding=self.encoding, newline="")
        else:
            self._handle = self.path.open("w", encoding=self.encoding, newline="")


@dataclass
class MemoryCharSink:
    # In-memory CharSink; keeps its text readable after close.
    _buffer: io.StringIO = field(default_factory=io.StringIO, init=False, repr=False)
    closed: bool = field(default=False, init=False)
    flushes: int = field(default=0, init=False)

    def write_char(self, char: str) -> None:
        self._check_open()
        self._buffer.write(char)

    def write_chars(self, chars: Sequence[str], offset: int, length: int) -> None:
        self._check_open()
        self._buffer.write("".join(chars[offset : offset + length]))

    def write_str(self, text: str, offset: int, length: int) -> None:
        self._check_open()
        self._buffer.write(text[offset : offset + length])

    def flush(self) -> None:
        self._check_open()
        self.flushes += 1

    def close(self) -> None:
        self.closed = True

    def getvalue(self) -> str:
        return self._buffer.getvalue()

    def _check_open(self) -> None:
        if self.closed:
            raise OSError("MemoryCharSink is closed")


def as_char_sink(target: object) -> CharSink:
    # Accept a CharSink as-is; wrap plain text streams (anything with write/flush).
    if isinstance(target, CharSink):
        return target
    if callable(getattr(target, "write", None)) and callable(getattr(target, "flush", None)):
        return TextIOCharSink(stream=target)  # type: ignore[arg-type]
    raise TypeError(f"Not a character sink: {type(target).__name__}")


@adapter(name="stdout", kind=SINK_KIND, provides=[TextIOCharSink])
def sink_stdout(settings: dict[str, object]) -> TextIOCharSink:
    # Process stdout is shared, so closing the writer only flushes it.
    _ = settings
    return TextIOCharSink(stream=sys.stdout, close_stream=False)


@adapter(name="file", kind=SINK_KIND, provides=[FileCharSink])
def sink_file(settings: dict[str, object]) -> FileCharSink:
    path = settings.get("path")
    if not isinstance(path, str) or not path:
        raise ValueError("sink file.settings.path must be a non-empty string")

    encoding = settings.get("encoding", "utf-8")
    if not isinstance(encoding, str) or not encoding:
        raise ValueError("sink file.settings.encoding must be a non-empty string")

    return FileCharSink(
        path=Path(path),
        encoding=encoding,
        atomic_replace=bool(settings.get("atomic_replace", False)),
    )


@adapter(name="memory", kind=SINK_KIND, provides=[MemoryCharSink])
def sink_memory(settings: dict[str, object]) -> MemoryCharSink:
    _ = settings
    return MemoryCharSink()
