"""Shared test fixtures for compose-parse tests."""
import shlex
import sys
from pathlib import Path

import pytest

from composeparse.core.config import set_config

FAKE_ENGINE = Path(__file__).parent / "fake_compose_engine.py"

PROJECT_NAME = "0b6e7a4c-2f1d-4c55-9d1e-3a3f8c2b9e10"

ENV_VARS = [
    "COMPOSE_COMMAND",
    "COMPOSE_FILE",
    "COMPOSE_CONTENT",
    "COMPOSE_PATH_SEPARATOR",
    "COMPOSE_PARSE_TIMEOUT",
    "COMPOSE_PARSE_OUTPUT_FORMAT",
    "COMPOSE_PARSE_LOG_FILE",
    "PROJECT_NAME",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Start every test without compose-related environment or cached config."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def fake_engine(monkeypatch):
    """Route engine calls to the scripted stand-in engine."""
    command = f"{shlex.quote(sys.executable)} {shlex.quote(str(FAKE_ENGINE))}"
    monkeypatch.setenv("COMPOSE_COMMAND", command)
    return command


@pytest.fixture
def compose_file(tmp_path):
    """Basic compose file with one service, one network and one volume."""
    path = tmp_path / "docker-compose.yml"
    path.write_text(
        "services:\n"
        "  web:\n"
        "    image: nginx:alpine\n"
        "    ports:\n"
        "      - '80:80'\n"
        "    volumes:\n"
        "      - data:/usr/share/nginx/html\n"
        "volumes:\n"
        "  data: {}\n"
    )
    return path


@pytest.fixture
def override_file(tmp_path):
    """Override file changing the image and adding an environment variable."""
    path = tmp_path / "docker-compose.override.yml"
    path.write_text(
        "services:\n"
        "  web:\n"
        "    image: nginx:1.27\n"
        "    environment:\n"
        "      GREETING: ${GREETING:-hello}\n"
    )
    return path


@pytest.fixture
def malformed_file(tmp_path):
    """Compose file that is not valid YAML."""
    path = tmp_path / "broken.yml"
    path.write_text("services:\n  web: {image: nginx\n")
    return path
