"""Shared fixtures for year board tests."""

import json
from pathlib import Path

import pytest

from yearboard.config import Config
from yearboard.server import app


def write_task(data_dir: Path, rel: str, payload) -> Path:
    """Write payload as JSON at data_dir/rel (strings are written verbatim)."""
    path = data_dir / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    text = payload if isinstance(payload, str) else json.dumps(payload, indent=4)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def config(data_dir):
    return Config(data_dir=str(data_dir))


@pytest.fixture
def client(config):
    app.config["TESTING"] = True
    app.config["YEARBOARD"] = config
    try:
        yield app.test_client()
    finally:
        app.config.pop("YEARBOARD", None)
