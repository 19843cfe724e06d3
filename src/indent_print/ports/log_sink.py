from __future__ import annotations

from typing import Protocol, runtime_checkable

from indent_print.domain.logging import LogMessage


# LogSink port receives structured diagnostics (writer faults, lifecycle).
@runtime_checkable
class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        # Port contract has no implementation; calling it directly is a wiring error.
        raise NotImplementedError("LogSink is a port; use a concrete adapter.")
