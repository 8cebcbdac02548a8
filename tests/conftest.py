"""Shared test fixtures."""

from __future__ import annotations

import pytest

from csp_editor.testing import ScriptedIO


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch, tmp_path):
    """Provide default settings for all tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CSP_EDITOR_LOG_JSON", "false")
    monkeypatch.setenv("CSP_EDITOR_LOG_LEVEL", "debug")

    # Reset cached settings
    import csp_editor.config.loader as loader
    loader._settings = None
    yield
    loader._settings = None


@pytest.fixture
def scripted_io():
    """Factory for ScriptedIO instances fed with the given input lines."""
    def _make(*lines: str) -> ScriptedIO:
        return ScriptedIO(lines)
    return _make


@pytest.fixture
def saved():
    """Collects strings passed to an editor session's persist callable."""
    return []
