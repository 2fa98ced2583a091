"""
Pytest configuration and shared fixtures for calculator tests.
"""

import json

import pytest

from calculator import config_manager


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    """Point config_manager at a temporary config.json and return a writer for it."""
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_manager, "config_json", path)

    def write(settings):
        path.write_text(json.dumps(settings), encoding="utf-8")
        return path

    return write
