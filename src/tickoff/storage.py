"""JSON file persistence for Tickoff."""

import json
import logging
import os
from pathlib import Path
from typing import Iterable

from tickoff.errors import PersistenceError
from tickoff.models import Task

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = "tasks.json"


class JsonStorage:
    """Loads and saves the whole task list as one JSON array."""

    def __init__(self, path: Path) -> None:
        """Initialize storage with the path of the JSON document."""
        self.path = Path(path)

    def exists(self) -> bool:
        """Return True if the task file is present."""
        return self.path.exists()

    def load(self) -> list[Task]:
        """Read every task from disk.

        A missing file is an empty list. Every task gets a fresh in-memory id.

        Raises:
            PersistenceError: If the file cannot be read or is not a valid
                task document.
        """
        if not self.path.exists():
            logger.info("No task file at %s; starting with an empty list", self.path)
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"{self.path} is not valid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, list):
            raise PersistenceError(f"{self.path} must contain a JSON array of tasks")

        tasks: list[Task] = []
        for position, raw in enumerate(data, start=1):
            if not isinstance(raw, dict):
                raise PersistenceError(f"{self.path}: task #{position} is not an object")
            try:
                tasks.append(Task.from_dict(raw))
            except KeyError as e:
                raise PersistenceError(f"{self.path}: task #{position} is missing {e}") from e
            except TypeError as e:
                raise PersistenceError(f"{self.path}: task #{position}: {e}") from e

        logger.info("Loaded %d tasks from %s", len(tasks), self.path)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        """Overwrite the task file with the given tasks.

        The document is written to a temporary sibling and moved into place,
        so a failed write never leaves a truncated file behind.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        payload = [task.to_dict() for task in tasks]
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to save tasks to %s: %s", self.path, e)
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_path)
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e
        logger.debug("Saved %d tasks to %s", len(payload), self.path)
