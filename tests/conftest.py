"""
Global test configuration and shared fixtures.
"""

from collections.abc import Callable
import os
from pathlib import Path
from typing import Any

import pytest


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_component_env(request, monkeypatch):
    """Ensure a clean AGENT_COMPONENTS_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("AGENT_COMPONENTS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def isolated_project_root(request, monkeypatch, tmp_path):
    """Run each test from an empty directory so no real pyproject.toml is read.

    Escape hatch: @pytest.mark.allow_real_project_config.
    """
    if request.node.get_closest_marker("allow_real_project_config"):
        return
    workdir = tmp_path / "project"
    workdir.mkdir()
    (workdir / "pyproject.toml").write_text("[project]\nname = 'isolated'\n")
    monkeypatch.chdir(workdir)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "allow_env_pollution: Keep AGENT_COMPONENTS_* variables from the host",
        "allow_real_project_config: Read the real pyproject.toml",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def make_message() -> Callable[..., dict[str, Any]]:
    """Build a message mapping in the serialized chat-message shape."""

    def _make(
        content: Any = "",
        additional_kwargs: dict[str, Any] | None = None,
        tool_calls: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        message: dict[str, Any] = {"content": content}
        if additional_kwargs is not None:
            message["additional_kwargs"] = additional_kwargs
        if tool_calls is not None:
            message["tool_calls"] = tool_calls
        return message

    return _make


@pytest.fixture
def pyproject_file(tmp_path) -> Callable[[str], Path]:
    """Write a pyproject.toml into a fresh directory and return that directory."""

    def _create(content: str) -> Path:
        root = tmp_path / "configured"
        root.mkdir(exist_ok=True)
        (root / "pyproject.toml").write_text(content, encoding="utf-8")
        return root

    return _create
