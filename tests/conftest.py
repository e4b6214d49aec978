# tests/conftest.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest

from tickoff.storage import JsonStorage
from tickoff.store import TaskStore


@pytest.fixture()
def today() -> date:
    return date(2024, 3, 15)


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "tasks.json"


@pytest.fixture()
def storage(data_file: Path) -> JsonStorage:
    return JsonStorage(data_file)


@pytest.fixture()
def store() -> TaskStore:
    """A store with a mix of categories, deadlines and priorities."""
    s = TaskStore()
    s.add("Write report", category="Work", deadline="2024-03-10", priority="High")
    s.add("Buy milk", category="Personal", priority="Low")
    s.add("Read chapter 4", category="Study", deadline="2024-03-20")
    s.add("Call plumber", category="personal", deadline="2024-03-15", priority="Medium")
    return s


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config lookup at a file that does not exist."""
    path = tmp_path / "no-config.toml"
    monkeypatch.setenv("TICKOFF_CONFIG", str(path))
    return path


@pytest.fixture()
def root_logger() -> Iterator[logging.Logger]:
    """Restore the root logger after a test reconfigures it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)
