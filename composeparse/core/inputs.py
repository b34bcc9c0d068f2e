"""Resolve compose files and project name from the command line and environment."""
from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Mapping, Optional, Sequence

from composeparse.core.errors import ArgumentError
from composeparse.core.logger import get_logger

logger = get_logger(__name__)

USAGE = """
Usage: compose-parse -f <compose-file> [-f <compose-file>...] <project-name>
       compose-parse <compose-file> <project-name>

Parses one or more docker-compose files and outputs a structured response.

Arguments:
  -f <compose-file>  Path to a docker-compose file to parse (can be specified multiple
                     times with later files overriding earlier ones)
  <project-name>     Name of the project to use for the parsed output. It is recommended
                     to use a UUID, as any fields which include the project name need to
                     be removed for normalization.

Environment:
  COMPOSE_FILE       Compose file path(s) used when no file is given on the command line
  COMPOSE_CONTENT    Compose document used when no file is given at all
  PROJECT_NAME       Project name used when none is given on the command line

Example:
  compose-parse -f docker-compose.yml -f docker-compose.override.yml my-project-name
"""

CONTENT_FILENAME = "docker-compose.yml"


@dataclass
class ComposeInputs:
    """Everything the engine needs to load one project."""

    project_name: str
    files: List[Path] = field(default_factory=list)
    content: Optional[str] = None  # Inline compose document (COMPOSE_CONTENT)
    env_files: List[Path] = field(default_factory=list)
    project_directory: Optional[Path] = None

    @property
    def from_content(self) -> bool:
        return self.content is not None

    @contextmanager
    def materialized(self) -> Iterator["ComposeInputs"]:
        """Yield inputs whose compose documents all exist on disk.

        Inline content is written to a temporary docker-compose.yml that is
        removed on exit. The project directory then defaults to the current
        directory so that a local .env file is still picked up.
        """
        if not self.from_content:
            yield self
            return

        with tempfile.TemporaryDirectory(prefix="compose-parse-") as tmp:
            compose_path = Path(tmp) / CONTENT_FILENAME
            compose_path.write_text(self.content)
            logger.debug(f"Wrote inline compose content to {compose_path}")
            yield ComposeInputs(
                project_name=self.project_name,
                files=[compose_path],
                env_files=list(self.env_files),
                project_directory=self.project_directory or Path.cwd(),
            )


def _argument_error(message: str) -> ArgumentError:
    return ArgumentError(f"{message}\n{USAGE}")


def _split_compose_file(value: str, environ: Mapping[str, str]) -> List[Path]:
    separator = environ.get("COMPOSE_PATH_SEPARATOR") or os.pathsep
    return [Path(part) for part in value.split(separator) if part.strip()]


def resolve_inputs(
    files: Optional[Sequence[str]] = None,
    positionals: Optional[Sequence[str]] = None,
    env_files: Optional[Sequence[str]] = None,
    project_directory: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ComposeInputs:
    """Work out which compose documents to load and under which project name.

    Args:
        files: Values of every -f/--file option, in order
        positionals: Remaining positional arguments
        env_files: Values of every --env-file option
        project_directory: Value of --project-directory
        environ: Environment to read the alternate entry points from
            (defaults to os.environ)

    Returns:
        ComposeInputs ready for the engine

    Raises:
        ArgumentError: If no compose document or no project name is available,
            or if unexpected positional arguments were given
    """
    environ = os.environ if environ is None else environ
    files = [f for f in (files or []) if f]
    positionals = list(positionals or [])

    compose_files: List[Path] = [Path(f) for f in files]
    project_name: Optional[str] = None

    if compose_files:
        if len(positionals) > 1:
            raise _argument_error(
                f"Unexpected arguments after project name: {' '.join(positionals[1:])}"
            )
        if positionals:
            project_name = positionals[0]
    else:
        if len(positionals) > 2:
            raise _argument_error(
                f"Unexpected arguments after project name: {' '.join(positionals[2:])}"
            )
        if len(positionals) == 2:
            compose_files = [Path(positionals[0])]
            project_name = positionals[1]
        elif len(positionals) == 1:
            project_name = positionals[0]

    content: Optional[str] = None
    if not compose_files:
        if environ.get("COMPOSE_FILE"):
            compose_files = _split_compose_file(environ["COMPOSE_FILE"], environ)
            logger.debug(f"Using compose files from COMPOSE_FILE: {compose_files}")
        elif environ.get("COMPOSE_CONTENT"):
            content = environ["COMPOSE_CONTENT"]
            logger.debug("Using compose document from COMPOSE_CONTENT")

    if not compose_files and content is None:
        raise _argument_error("At least one compose file must be specified with -f")

    if not project_name:
        project_name = environ.get("PROJECT_NAME") or None

    if not project_name:
        raise _argument_error("Project name is required")

    return ComposeInputs(
        project_name=project_name,
        files=compose_files,
        content=content,
        env_files=[Path(e) for e in (env_files or []) if e],
        project_directory=Path(project_directory) if project_directory else None,
    )
