from __future__ import annotations

import json
from pathlib import Path

from indent_print.adapters.contracts import adapter
from indent_print.domain.logging import LogMessage

LOG_KIND = "log_sink"


class StdoutLogSink:
    # Minimal structured log sink: one JSON object per line on stdout.
    def emit(self, message: LogMessage) -> None:
        print(json.dumps(log_to_dict(message), separators=(",", ":"), ensure_ascii=False))


class JsonlLogSink:
    # File-backed structured log sink for writer diagnostics.
    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._path.open("a", encoding="utf-8")

    def emit(self, message: LogMessage) -> None:
        payload = json.dumps(log_to_dict(message), separators=(",", ":"), ensure_ascii=False)
        self._file.write(payload + "\n")
        self._file.flush()

    def close(self) -> None:
        self._file.close()


class MemoryLogSink:
    # Collects messages in order; used by tests and embedding callers.
    def __init__(self) -> None:
        self.messages: list[LogMessage] = []

    def emit(self, message: LogMessage) -> None:
        self.messages.append(message)


@adapter(name="log_stdout", kind=LOG_KIND, provides=[StdoutLogSink])
def log_stdout(settings: dict[str, object]) -> StdoutLogSink:
    _ = settings
    return StdoutLogSink()


@adapter(name="log_jsonl", kind=LOG_KIND, provides=[JsonlLogSink])
def log_jsonl(settings: dict[str, object]) -> JsonlLogSink:
    path = settings.get("path")
    if not isinstance(path, str) or not path:
        raise ValueError("log_jsonl.settings.path must be a non-empty string")
    return JsonlLogSink(Path(path))


@adapter(name="log_memory", kind=LOG_KIND, provides=[MemoryLogSink])
def log_memory(settings: dict[str, object]) -> MemoryLogSink:
    _ = settings
    return MemoryLogSink()


def log_to_dict(message: LogMessage) -> dict[str, object]:
    return {
        "level": message.level,
        "message": message.message,
        "timestamp": message.timestamp.isoformat().replace("+00:00", "Z"),
        "fields": message.fields,
    }
