"""Test configuration and fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from operator_agent.agent.config import AgentSettings

SERVICE_URL = "http://control.example:8000"
CLUSTER = "cluster-a"


def make_response(status_code: int, body: Any = None, *, raw: bytes | None = None) -> requests.Response:
    """Build a real `requests.Response` with the given status and JSON body."""
    resp = requests.Response()
    resp.status_code = status_code
    if raw is not None:
        resp._content = raw
    elif body is None:
        resp._content = b""
    else:
        resp._content = json.dumps(body).encode("utf-8")
    resp.encoding = "utf-8"
    return resp


@pytest.fixture
def session() -> requests.Session:
    """A real session whose network methods are mocks."""
    s = requests.Session()
    s.get = Mock(name="get")  # type: ignore[method-assign]
    s.put = Mock(name="put")  # type: ignore[method-assign]
    return s


@pytest.fixture
def bootstrap_file(tmp_path: Path) -> Path:
    """Provide a bootstrap configuration file with two keys."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"a": 1, "b": 2}), encoding="utf-8")
    return path


@pytest.fixture
def settings(bootstrap_file: Path) -> AgentSettings:
    """Provide test agent settings (no .env lookup)."""
    return AgentSettings(
        _env_file=None,
        url=SERVICE_URL,
        cluster=CLUSTER,
        config_interval=1,
        trigger_interval=1,
        configfile=bootstrap_file,
        log_level="DEBUG",
        request_timeout=2.0,
    )


@pytest.fixture
def respond():
    """Factory fixture for canned HTTP responses."""
    return make_response
