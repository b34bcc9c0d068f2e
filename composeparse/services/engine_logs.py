"""
Compose engine diagnostics.

Compose engines log through logrus, which writes one of two line shapes
to stderr depending on whether a terminal is attached:

    time="2025-01-01T01:00:00-07:00" level=warning msg="the attribute `version` is obsolete"
    WARN[0000] the attribute `version` is obsolete

Anything else on stderr is plain error text from the engine.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

# See: https://github.com/sirupsen/logrus/blob/master/level_test.go
LOG_LEVELS = {
    "panic": 0,
    "fatal": 1,
    "error": 2,
    "warning": 3,
    "info": 4,
    "debug": 5,
    "trace": 6,
}

WARNING_RANK = LOG_LEVELS["warning"]

# logrus level -> stdlib logging level for relayed lines
_LOGGING_LEVELS = {
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}
_ESCAPE_RE = re.compile(r"\\(.)")

# Short level tags used by the logrus text formatter on terminals
_SHORT_LEVELS = {
    "PANI": "panic",
    "FATA": "fatal",
    "ERRO": "error",
    "WARN": "warning",
    "INFO": "info",
    "DEBU": "debug",
    "TRAC": "trace",
}

_KEY_VALUE_RE = re.compile(
    r'^time="(?P<time>[^"]*)"\s+level=(?P<level>[a-z]+)\s+'
    r'msg=(?:"(?P<msg>(?:[^"\\]|\\.)*)"|(?P<bare>\S+))'
)
_SHORT_RE = re.compile(r'^(?P<level>[A-Z]{4})\[(?P<time>[^\]]*)\]\s*(?P<msg>.*)$')


@dataclass
class EngineLogLine:
    """One structured log line from the engine."""
    level: str
    message: str
    time: str = ""

    @property
    def rank(self) -> int:
        return LOG_LEVELS.get(self.level, LOG_LEVELS["error"])

    @property
    def is_error(self) -> bool:
        return self.rank < WARNING_RANK

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS.get(self.level, logging.ERROR)


def _unescape(message: str) -> str:
    """Undo logrus quoting: \\", \\\\, \\n, \\t, \\r."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), message)


def parse_log_line(line: str) -> Optional[EngineLogLine]:
    """
    Extract a structured log line from engine stderr output.

    Returns:
        EngineLogLine, or None when the line is not in a logrus format
    """
    line = line.strip()

    match = _KEY_VALUE_RE.match(line)
    if match:
        if match.group("msg") is None:
            message = match.group("bare")
        else:
            message = _unescape(match.group("msg"))
        return EngineLogLine(level=match.group("level"), message=message, time=match.group("time"))

    match = _SHORT_RE.match(line)
    if match and match.group("level") in _SHORT_LEVELS:
        return EngineLogLine(
            level=_SHORT_LEVELS[match.group("level")],
            message=match.group("msg").strip(),
            time=match.group("time"),
        )

    return None


def classify_stderr(stderr: str) -> Tuple[List[EngineLogLine], List[str]]:
    """
    Split engine stderr into relayable log lines and error text.

    Returns:
        (logs, errors) where logs are non-error structured lines and
        errors are messages of error/fatal/panic lines plus any
        unstructured text, in output order
    """
    logs: List[EngineLogLine] = []
    errors: List[str] = []

    for raw in _non_empty(stderr.splitlines()):
        entry = parse_log_line(raw)
        if entry is None:
            errors.append(raw.strip())
        elif entry.is_error:
            errors.append(entry.message)
        else:
            logs.append(entry)

    return logs, errors


def _non_empty(lines: Iterable[str]) -> Iterable[str]:
    return (line for line in lines if line.strip())
