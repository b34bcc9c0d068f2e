"""Tests for compose input resolution."""
import os
from pathlib import Path

import pytest

from composeparse.core.errors import ArgumentError
from composeparse.core.inputs import ComposeInputs, resolve_inputs


class TestCommandLineInputs:
    """Files and project name from the command line."""

    def test_flag_files_keep_order(self):
        inputs = resolve_inputs(files=["a.yml", "b.yml"], positionals=["proj"], environ={})

        assert inputs.files == [Path("a.yml"), Path("b.yml")]
        assert inputs.project_name == "proj"
        assert inputs.content is None

    def test_single_file_positional_variant(self):
        inputs = resolve_inputs(positionals=["docker-compose.yml", "proj"], environ={})

        assert inputs.files == [Path("docker-compose.yml")]
        assert inputs.project_name == "proj"

    def test_missing_file_is_argument_error(self):
        with pytest.raises(ArgumentError, match="At least one compose file must be specified"):
            resolve_inputs(positionals=["proj"], environ={})

    def test_missing_project_name_is_argument_error(self):
        with pytest.raises(ArgumentError, match="Project name is required"):
            resolve_inputs(files=["a.yml"], environ={})

    def test_extra_positionals_rejected(self):
        with pytest.raises(ArgumentError, match="Unexpected arguments after project name: extra"):
            resolve_inputs(files=["a.yml"], positionals=["proj", "extra"], environ={})

    def test_argument_errors_include_usage(self):
        with pytest.raises(ArgumentError) as excinfo:
            resolve_inputs(environ={})

        assert "Usage: compose-parse -f <compose-file>" in excinfo.value.message

    def test_env_files_and_project_directory(self):
        inputs = resolve_inputs(
            files=["a.yml"],
            positionals=["proj"],
            env_files=["one.env", "two.env"],
            project_directory="/srv/app",
            environ={},
        )

        assert inputs.env_files == [Path("one.env"), Path("two.env")]
        assert inputs.project_directory == Path("/srv/app")


class TestEnvironmentInputs:
    """Alternate entry points through COMPOSE_FILE, COMPOSE_CONTENT and PROJECT_NAME."""

    def test_compose_file_env_split_on_pathsep(self):
        environ = {"COMPOSE_FILE": os.pathsep.join(["a.yml", "b.yml"]), "PROJECT_NAME": "proj"}

        inputs = resolve_inputs(environ=environ)

        assert inputs.files == [Path("a.yml"), Path("b.yml")]
        assert inputs.project_name == "proj"

    def test_compose_path_separator_override(self):
        environ = {"COMPOSE_FILE": "a.yml,b.yml", "COMPOSE_PATH_SEPARATOR": ","}

        inputs = resolve_inputs(positionals=["proj"], environ=environ)

        assert inputs.files == [Path("a.yml"), Path("b.yml")]

    def test_command_line_files_win_over_env(self):
        environ = {"COMPOSE_FILE": "env.yml", "COMPOSE_CONTENT": "services: {}"}

        inputs = resolve_inputs(files=["cli.yml"], positionals=["proj"], environ=environ)

        assert inputs.files == [Path("cli.yml")]
        assert inputs.content is None

    def test_positional_project_wins_over_env(self):
        inputs = resolve_inputs(
            files=["a.yml"], positionals=["cli-proj"], environ={"PROJECT_NAME": "env-proj"}
        )

        assert inputs.project_name == "cli-proj"

    def test_compose_content(self):
        environ = {"COMPOSE_CONTENT": "services:\n  web:\n    image: nginx\n", "PROJECT_NAME": "proj"}

        inputs = resolve_inputs(environ=environ)

        assert inputs.from_content
        assert inputs.files == []
        assert "image: nginx" in inputs.content


class TestMaterialized:
    """Inline content is written to a temporary file for the engine."""

    def test_files_pass_through(self):
        inputs = ComposeInputs(project_name="proj", files=[Path("a.yml")])

        with inputs.materialized() as ready:
            assert ready is inputs

    def test_content_written_and_removed(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        inputs = ComposeInputs(project_name="proj", content="services: {}\n")

        with inputs.materialized() as ready:
            written = ready.files[0]
            assert written.name == "docker-compose.yml"
            assert written.read_text() == "services: {}\n"
            assert ready.project_directory == tmp_path
            assert ready.project_name == "proj"

        assert not written.exists()
