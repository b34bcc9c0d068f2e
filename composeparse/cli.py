#!/usr/bin/env python3
"""compose-parse CLI - resolve Compose files into one JSON project model."""
from typing import List, Optional

import click
import typer
from pydantic_core import PydanticSerializationError

from composeparse.core.config import get_config
from composeparse.core.errors import ArgumentError, ComposeParseError, ConfigError, EncodeError
from composeparse.core.inputs import USAGE, resolve_inputs
from composeparse.core.logger import get_logger, set_verbose, setup_file_logging
from composeparse.models.response import ParseResponse
from composeparse.services.compose_engine import ComposeEngine
from composeparse.services.normalizer import ProjectNormalizer

PROG_NAME = "compose-parse"

app = typer.Typer(
    name=PROG_NAME,
    help="""Parse one or more compose files through the compose engine.

Prints {"success": true, "data": <project>} on stdout, or
{"success": false, "error": {...}} on stderr with exit code 1.

Example:
  compose-parse -f docker-compose.yml -f docker-compose.override.yml my-project
""",
    add_completion=False,
)

logger = get_logger(__name__)


def emit_error(exc: ComposeParseError) -> None:
    """Write a failed response line to stderr."""
    typer.echo(ParseResponse.failed(exc).to_line(), err=True)


def emit_project(project: dict) -> None:
    """Write a successful response line to stdout.

    Raises:
        EncodeError: If the project cannot be serialized or written
    """
    try:
        line = ParseResponse.ok(project).to_line()
        typer.echo(line)
    except (PydanticSerializationError, ValueError, OSError) as exc:
        raise EncodeError(f"Failed to encode response: {exc}") from exc


@app.command()
def parse(
    args: Optional[List[str]] = typer.Argument(
        None,
        metavar="[COMPOSE_FILE] PROJECT_NAME",
        help="Project name, preceded by a compose file when -f is not used",
        show_default=False,
    ),
    files: Optional[List[str]] = typer.Option(
        None, "--file", "-f",
        help="Compose file to parse; repeat to merge, later files override earlier ones",
        show_default=False,
    ),
    env_files: Optional[List[str]] = typer.Option(
        None, "--env-file",
        help="Extra env file for interpolation (repeatable)",
        show_default=False,
    ),
    project_directory: Optional[str] = typer.Option(
        None, "--project-directory",
        help="Working directory for relative paths and .env lookup",
    ),
    normalize: bool = typer.Option(
        False, "--normalize",
        help="Strip the project name and engine-assigned names from the output",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine calls to stderr"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Resolve compose files into a single JSON project model."""
    set_verbose(verbose)

    try:
        inputs = resolve_inputs(
            files=files,
            positionals=args,
            env_files=env_files,
            project_directory=project_directory,
        )

        config = get_config()
        try:
            setup_file_logging(log_file or config.log_file, verbose=verbose)
        except OSError as exc:
            raise ConfigError(f"Cannot open log file: {exc}") from exc

        project = ComposeEngine(config).load_project(inputs)

        if normalize:
            project = ProjectNormalizer().normalize(project, inputs.project_name)

        emit_project(project)
    except ComposeParseError as exc:
        logger.debug(f"{exc.name}: {exc.message}")
        emit_error(exc)
        raise typer.Exit(1) from exc


# Typer releases that bundle their own click raise their own exception
# classes instead of click's.
USAGE_ERRORS = (click.ClickException,) + (
    (typer.TyperException,) if hasattr(typer, "TyperException") else ()
)
ABORTS = (click.exceptions.Abort, typer.Abort)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit code.

    Usage errors from the option parser (missing -f value, unknown
    option) are reported as ArgumentError responses like every other
    argument problem.
    """
    try:
        result = app(args=argv, prog_name=PROG_NAME, standalone_mode=False)
    except USAGE_ERRORS as exc:
        emit_error(ArgumentError(f"{exc.format_message()}\n{USAGE}"))
        return 1
    except ABORTS:
        return 1

    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
