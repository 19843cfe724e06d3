from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


# CharSink port defines where IndentingWriter output ends up.
@runtime_checkable
class CharSink(Protocol):
    def write_char(self, char: str) -> None:
        """Write a single character."""
        # Port contract has no implementation; calling it directly is a wiring error.
        raise NotImplementedError("CharSink is a port; use a concrete adapter.")

    def write_chars(self, chars: Sequence[str], offset: int, length: int) -> None:
        """Write ``length`` characters of ``chars`` starting at ``offset``."""
        raise NotImplementedError("CharSink is a port; use a concrete adapter.")

    def write_str(self, text: str, offset: int, length: int) -> None:
        """Write ``length`` characters of ``text`` starting at ``offset``."""
        raise NotImplementedError("CharSink is a port; use a concrete adapter.")

    def flush(self) -> None:
        raise NotImplementedError("CharSink is a port; use a concrete adapter.")

    def close(self) -> None:
        """Finalize and release resources held by the sink."""
        raise NotImplementedError("CharSink is a port; use a concrete adapter.")
