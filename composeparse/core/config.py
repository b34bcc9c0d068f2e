"""compose-parse runtime configuration and settings."""
import os
from dataclasses import dataclass
from typing import Optional

from composeparse.core.errors import ConfigError

OUTPUT_FORMATS = ("json", "yaml")


@dataclass
class ParserConfig:
    """Runtime configuration for the compose engine call.

    Attributes:
        compose_command: Engine command line override, e.g. "podman compose"
            (default: auto-detected from PATH)
        engine_timeout: Timeout in seconds for the engine process (default: 60)
        output_format: Format requested from the engine's ``config`` command,
            "json" or "yaml" (default: json)
        log_file: Optional path for file logging
    """

    compose_command: Optional[str] = None
    engine_timeout: int = 60
    output_format: str = "json"
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Unsupported output format '{self.output_format}'. "
                f"Expected one of: {', '.join(OUTPUT_FORMATS)}"
            )
        if self.engine_timeout <= 0:
            raise ConfigError(
                f"Engine timeout must be a positive number of seconds, got {self.engine_timeout}"
            )

    @classmethod
    def from_env(cls) -> "ParserConfig":
        """Create config from environment variables.

        Environment variables:
            COMPOSE_COMMAND: Compose engine command line
            COMPOSE_PARSE_TIMEOUT: Engine timeout in seconds
            COMPOSE_PARSE_OUTPUT_FORMAT: Engine output format (json or yaml)
            COMPOSE_PARSE_LOG_FILE: Log file path

        Returns:
            ParserConfig instance with values from environment or defaults

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        raw_timeout = os.getenv("COMPOSE_PARSE_TIMEOUT", str(cls.engine_timeout))
        try:
            timeout = int(raw_timeout)
        except ValueError as exc:
            raise ConfigError(
                f"COMPOSE_PARSE_TIMEOUT must be an integer, got '{raw_timeout}'"
            ) from exc

        return cls(
            compose_command=os.getenv("COMPOSE_COMMAND") or None,
            engine_timeout=timeout,
            output_format=os.getenv("COMPOSE_PARSE_OUTPUT_FORMAT", cls.output_format).lower(),
            log_file=os.getenv("COMPOSE_PARSE_LOG_FILE") or None,
        )


# Global config instance (can be overridden)
_config: Optional[ParserConfig] = None


def get_config() -> ParserConfig:
    """Get the global configuration.

    Returns:
        ParserConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = ParserConfig.from_env()
    return _config


def set_config(config: Optional[ParserConfig]):
    """Set the global configuration.

    Args:
        config: ParserConfig instance to use globally, or None to re-read
            the environment on the next get_config() call
    """
    global _config
    _config = config
