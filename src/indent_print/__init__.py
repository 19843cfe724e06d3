from .domain import LogMessage, to_text
from .ports import CharSink, LogSink
from .writer import INDENT_WIDTH, IndentingWriter, SinkClosedError

__all__ = [
    "IndentingWriter",
    "SinkClosedError",
    "INDENT_WIDTH",
    "CharSink",
    "LogSink",
    "LogMessage",
    "to_text",
]
