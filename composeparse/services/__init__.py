"""
Compose engine integration services.

Provides the adapter around the external compose engine and the
normalizer for its project model.
"""

from .compose_engine import ComposeEngine, resolve_command
from .engine_logs import EngineLogLine, classify_stderr, parse_log_line
from .normalizer import ProjectNormalizer

__all__ = [
    "ComposeEngine",
    "resolve_command",
    "EngineLogLine",
    "classify_stderr",
    "parse_log_line",
    "ProjectNormalizer",
]
