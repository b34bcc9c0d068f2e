"""Error taxonomy surfaced in the response envelope."""


class ComposeParseError(Exception):
    """Base class for errors reported as a failed response.

    The ``name`` class attribute is the error name written to the
    ``error.name`` field of the response.
    """

    name = "ComposeParseError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ArgumentError(ComposeParseError):
    """Command line or environment did not describe a usable invocation."""

    name = "ArgumentError"


class ConfigError(ComposeParseError):
    """Runtime configuration or the compose engine itself is unusable."""

    name = "ConfigError"


class ParseError(ComposeParseError):
    """The compose engine rejected the files or returned unreadable output."""

    name = "ParseError"


class EncodeError(ComposeParseError):
    """The response could not be serialized or written."""

    name = "EncodeError"
