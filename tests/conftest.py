"""Pytest fixtures for the image archive network tests."""

import json
from pathlib import Path

import pytest

from archive_data import ArchiveData, ArchiveItem
from network_config import NetworkConfig


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def make_item():
    """Build an ArchiveItem with short keyword arguments."""
    def _make(id, themes=(), moods=(), name=None, source=None, image=None):
        return ArchiveItem(id=id, image=image or f"images/{id}.png", source=source,
                           name=name, themes=themes, moods=moods)
    return _make


@pytest.fixture
def scenario_items(make_item):
    """A: [x], B: [x, y], C: [y], D: [z] -> links A-B and B-C only."""
    return [
        make_item("A", themes=["x"], name="A", source="https://example.org/a"),
        make_item("B", themes=["x", "y"], name="B"),
        make_item("C", themes=["y"], name="C"),
        make_item("D", themes=["z"], name="D"),
    ]


@pytest.fixture
def scenario_data(scenario_items):
    return ArchiveData(scenario_items)


@pytest.fixture
def config():
    return NetworkConfig()


@pytest.fixture
def raw_archive():
    """A decoded archive document with a few malformed entries."""
    return {
        "meta": {"themes": ["water", "city"], "moods": ["calm"]},
        "nodes": [
            {"id": "harbor", "image": "harbor.png", "source": "https://example.org/harbor",
             "themes": ["water", "city"], "moods": ["calm"]},
            {"id": "shore", "image": "shore.png", "name": "Shore", "themes": ["water"]},
            {"id": "static", "image": "static.png", "themes": "not-a-list", "moods": ["tense", 7]},
            {"image": "orphan.png", "themes": ["water"]},
            {"id": "noimage", "themes": ["city"]},
            {"id": "harbor", "image": "again.png"},
            "not an object",
        ],
    }


@pytest.fixture
def archive_file(tmp_path, raw_archive):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(raw_archive), encoding="utf-8")
    return path
