from .logging import LogMessage
from .text import is_char_array, to_text

__all__ = ["LogMessage", "to_text", "is_char_array"]
