from .char_sink import CharSink
from .log_sink import LogSink

__all__ = ["CharSink", "LogSink"]
