from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Config models map YAML sections to typed structures.

_SEPARATOR_ALIASES = {"lf": "\n", "crlf": "\r\n", "cr": "\r"}


class WriterSection(BaseModel):
    # Writer options; line_separator accepts an alias (lf/crlf/cr/platform) or the literal string.
    model_config = ConfigDict(extra="forbid")
    line_separator: str = "platform"

    @field_validator("line_separator")
    @classmethod
    def _non_empty_separator(cls, value: str) -> str:
        if not value:
            raise ValueError("writer.line_separator must be an alias (lf, crlf, cr, platform) or a non-empty string")
        return value

    def resolved_line_separator(self) -> str:
        if self.line_separator == "platform":
            return os.linesep
        return _SEPARATOR_ALIASES.get(self.line_separator, self.line_separator)


class AdapterDecl(BaseModel):
    # Adapter selection: registry name plus free-form settings passed to its factory.
    model_config = ConfigDict(extra="forbid")
    name: str
    settings: dict[str, Any] = Field(default_factory=dict)


class AppConfig(BaseModel):
    # Root config: writer options, the character sink, and an optional log sink.
    model_config = ConfigDict(extra="forbid")
    writer: WriterSection = Field(default_factory=WriterSection)
    sink: AdapterDecl = Field(default_factory=lambda: AdapterDecl(name="stdout"))
    logging: AdapterDecl | None = None
