"""
Compose engine adapter.

All compose-file semantics (merge order, interpolation, .env handling,
extension fields, schema validation) belong to the external compose
engine. This module only builds the engine command line, runs it with
the inherited process environment and turns its output into a project
dictionary or one of the error types from composeparse.core.errors.

Engine resolution order:
    COMPOSE_COMMAND → docker compose → podman compose → docker-compose
"""
import json
import os
import shlex
import shutil
import subprocess
from typing import Any, Dict, List, Optional

import yaml

from composeparse.core.config import ParserConfig, get_config
from composeparse.core.errors import ConfigError, ParseError
from composeparse.core.inputs import ComposeInputs
from composeparse.core.logger import get_logger
from composeparse.services.engine_logs import classify_stderr

logger = get_logger(__name__)

# Candidate engines, tried in order when COMPOSE_COMMAND is not set
ENGINE_CANDIDATES = [
    ["docker", "compose"],
    ["podman", "compose"],
    ["docker-compose"],
]


def _engine_available(candidate: List[str], timeout: int) -> bool:
    """Check that a candidate engine is installed and answers `version`."""
    if not shutil.which(candidate[0]):
        return False
    if len(candidate) == 1:
        return True

    # docker and podman can be installed without the compose plugin
    try:
        result = subprocess.run(
            candidate + ["version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


def resolve_command(config: Optional[ParserConfig] = None) -> List[str]:
    """Resolve the compose engine command to use.

    Raises:
        ConfigError: If COMPOSE_COMMAND is malformed or no engine is available
    """
    config = config or get_config()

    if config.compose_command:
        try:
            command = shlex.split(config.compose_command)
        except ValueError as exc:
            raise ConfigError(f"Invalid COMPOSE_COMMAND '{config.compose_command}': {exc}") from exc
        if not command:
            raise ConfigError("COMPOSE_COMMAND is empty")
        return command

    for candidate in ENGINE_CANDIDATES:
        if _engine_available(candidate, config.engine_timeout):
            return list(candidate)
        logger.debug(f"Compose engine not available: {' '.join(candidate)}")

    raise ConfigError(
        "No compose engine found. Install docker compose, podman compose or "
        "docker-compose, or set COMPOSE_COMMAND."
    )


class ComposeEngine:
    """
    Loads compose projects through an external compose engine.

    Example:
        engine = ComposeEngine()
        project = engine.load_project(ComposeInputs(
            project_name='0b6e7a4c-...',
            files=[Path('docker-compose.yml'), Path('docker-compose.override.yml')],
        ))
    """

    def __init__(self, config: Optional[ParserConfig] = None, command: Optional[List[str]] = None):
        """
        Initialize engine adapter.

        Args:
            config: Runtime configuration (defaults to the global config)
            command: Explicit engine command (defaults to resolve_command())
        """
        self.config = config or get_config()
        self._command = command
        self.logger = logger

    @property
    def command(self) -> List[str]:
        if self._command is None:
            self._command = resolve_command(self.config)
        return self._command

    def build_args(self, inputs: ComposeInputs) -> List[str]:
        """Build the full engine command line for a materialized input set."""
        args = list(self.command)
        args += ["--project-name", inputs.project_name]

        if inputs.project_directory:
            args += ["--project-directory", str(inputs.project_directory)]

        for env_file in inputs.env_files:
            args += ["--env-file", str(env_file)]

        for compose_file in inputs.files:
            args += ["-f", str(compose_file)]

        args.append("config")
        # YAML is what `config` prints by default; engines without --format accept this
        if self.config.output_format != "yaml":
            args += ["--format", self.config.output_format]
        return args

    def load_project(self, inputs: ComposeInputs) -> Dict[str, Any]:
        """
        Resolve compose files into the engine's project model.

        Args:
            inputs: Files, project name and optional env files

        Returns:
            Project dictionary as produced by the engine

        Raises:
            ConfigError: If the engine cannot be started
            ParseError: If the engine rejects the input or its output is unreadable
        """
        with inputs.materialized() as ready:
            args = self.build_args(ready)
            stdout = self._run(args)

        return self._decode(stdout)

    def _run(self, args: List[str]) -> str:
        self.logger.debug(f"Running compose engine: {shlex.join(args)}")

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                env=dict(os.environ),
                timeout=self.config.engine_timeout,
            )
        except FileNotFoundError as exc:
            raise ConfigError(
                f"Failed to create compose project options: compose engine '{args[0]}' not found"
            ) from exc
        except PermissionError as exc:
            raise ConfigError(
                f"Failed to create compose project options: cannot execute '{args[0]}': {exc}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ParseError(
                f"Failed to parse compose file: compose engine timed out after "
                f"{self.config.engine_timeout}s"
            ) from exc

        logs, errors = classify_stderr(result.stderr or "")
        for entry in logs:
            self.logger.log(entry.logging_level, f"[engine] {entry.message}")

        if result.returncode != 0:
            detail = "\n".join(errors) or f"compose engine exited with code {result.returncode}"
            raise ParseError(f"Failed to parse compose file: {detail}")

        for message in errors:
            # Exit code 0 means the engine recovered; keep what it said
            self.logger.warning(f"[engine] {message}")

        return result.stdout

    def _decode(self, stdout: str) -> Dict[str, Any]:
        try:
            if self.config.output_format == "yaml":
                project = yaml.safe_load(stdout)
            else:
                project = json.loads(stdout)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ParseError(f"Failed to marshal compose project to JSON: {exc}") from exc

        if not isinstance(project, dict):
            raise ParseError(
                "Failed to marshal compose project to JSON: engine returned "
                f"{type(project).__name__}, expected an object"
            )

        self.logger.debug(
            f"Loaded project '{project.get('name', '')}' with services: "
            f"{', '.join(project.get('services') or {})}"
        )
        return project
