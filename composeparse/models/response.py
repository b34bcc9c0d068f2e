"""Structured response written by the command line tool."""
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict

from composeparse.core.errors import ComposeParseError

ErrorName = Literal["ArgumentError", "ConfigError", "ParseError", "EncodeError"]


class ErrorInfo(BaseModel):
    """Structured error information."""

    model_config = ConfigDict(extra='forbid')

    name: ErrorName
    message: str


class ParseResponse(BaseModel):
    """Either a resolved compose project or the error that stopped it."""

    model_config = ConfigDict(extra='forbid')

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[ErrorInfo] = None

    @classmethod
    def ok(cls, data: Dict[str, Any]) -> "ParseResponse":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, exc: ComposeParseError) -> "ParseResponse":
        return cls(success=False, error=ErrorInfo(name=exc.name, message=exc.message))

    def to_line(self) -> str:
        """Serialize as compact single-line JSON, omitting unset fields."""
        return self.model_dump_json(exclude_unset=True)
