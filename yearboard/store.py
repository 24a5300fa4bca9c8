"""
Task file mutations.

Two operations rewrite the data directory:
  reschedule - old file becomes <id><sep><old>-depr.json (status=rescheduled),
               a copy with the new deadline is written as <id><sep><new>-updateMe.json
  add_item   - <program>/<timestamp>___<deadline>-importMe.json

The two writes of a reschedule are not atomic: a crash between them leaves
only the deprecated copy on disk.
"""
import json
import logging
import os
import re
import time
from pathlib import Path
from typing import Callable, Dict, Any, Optional

from .config import default_item_fields
from .schema import FileSuffix, is_valid_deadline_format, parse_task_filename

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for rejected mutations. The message is shown to the user."""
    status_code = 400


class InvalidRequest(StoreError):
    status_code = 400


class ItemNotFound(StoreError):
    status_code = 404


class ItemConflict(StoreError):
    status_code = 409


def _write_json(path: Path, data: Dict[str, Any]) -> None:
    path.write_text(json.dumps(data, indent=4, ensure_ascii=False), encoding="utf-8")


class TaskFileStore:
    """Reads and rewrites task files under a single data directory."""

    def __init__(self, data_dir, new_item_defaults: Optional[Dict[str, str]] = None,
                 clock: Callable[[], float] = time.time):
        self.data_dir = Path(data_dir)
        self.new_item_defaults = dict(new_item_defaults or default_item_fields())
        self.clock = clock

    # ── Paths ────────────────────────────────────────────────────────────

    def resolve_item_path(self, rel_file: str) -> Path:
        """
        Map a board-relative path to a file inside the data directory.

        Accepts "file.json" or "subdir/file.json". The resolved file must
        lie inside the data directory, symlinks included.
        """
        parts = re.split(r"[\\/]", rel_file)
        if "\x00" in rel_file or not 1 <= len(parts) <= 2 or any(p in ("", ".", "..") for p in parts):
            raise InvalidRequest("Invalid file path format")

        file_path = self.data_dir.joinpath(*parts)
        try:
            real_data = self.data_dir.resolve(strict=True)
            real_file = file_path.resolve(strict=True)
        except (OSError, RuntimeError):
            raise ItemNotFound("File not found or invalid path")
        if not real_file.is_file() or not real_file.is_relative_to(real_data):
            raise ItemNotFound("File not found or invalid path")
        return file_path

    # ── Reschedule ───────────────────────────────────────────────────────

    def reschedule(self, rel_file: str, new_deadline: str) -> Path:
        """Move an item to new_deadline. Returns the path of the -updateMe copy."""
        if not rel_file or not new_deadline:
            raise InvalidRequest("Missing file or deadline")
        if not is_valid_deadline_format(new_deadline):
            raise InvalidRequest("Invalid deadline format")

        file_path = self.resolve_item_path(rel_file)
        data = self._read_object(file_path)

        name = parse_task_filename(file_path.name)
        if name is None:
            raise InvalidRequest("Invalid filename format")

        depr_path = file_path.with_name(name.with_date(name.deadline, FileSuffix.DEPRECATED))
        new_path = file_path.with_name(name.with_date(new_deadline, FileSuffix.UPDATE_ME))
        if new_path.exists():
            raise ItemConflict("A file with the new deadline already exists")

        data["status"] = "rescheduled"
        _write_json(depr_path, data)
        if depr_path != file_path:
            file_path.unlink(missing_ok=True)

        updated = {k: v for k, v in data.items() if k != "status"}
        updated["deadline"] = new_deadline
        _write_json(new_path, updated)

        logger.info(f"Rescheduled {rel_file} → {new_path.name}")
        return new_path

    def _read_object(self, path: Path) -> Dict[str, Any]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError:
            raise InvalidRequest("Failed to read file")
        except json.JSONDecodeError as e:
            raise InvalidRequest(f"Failed to parse JSON: {e.msg}")
        if not isinstance(data, dict):
            raise InvalidRequest(f"Expected JSON object, got {type(data).__name__}")
        return data

    # ── Add item ─────────────────────────────────────────────────────────

    def add_item(self, program: str, deadline: str, name: str) -> Path:
        """Create a new -importMe item under the program's folder."""
        if not program or not deadline or not name:
            raise InvalidRequest("Missing required fields")
        if not is_valid_deadline_format(deadline):
            raise InvalidRequest("Invalid deadline format")

        program = os.path.basename(program.replace("\\", "/"))
        if program in ("", ".", "..") or "\x00" in program:
            raise InvalidRequest("Invalid program name")

        program_dir = self.data_dir / program
        program_dir.mkdir(parents=True, exist_ok=True)

        timestamp = int(self.clock())
        file_path = program_dir / f"{timestamp}___{deadline}-{FileSuffix.IMPORT_ME.value}.json"
        if file_path.exists():
            raise ItemConflict("Unable to create item - a conflict was detected. Please try again.")

        defaults = dict(self.new_item_defaults)
        data = {k: defaults.pop(k) for k in ("status", "id", "integrity") if k in defaults}
        data.update(program=program, deadline=deadline, name=name)
        data.update({k: v for k, v in defaults.items() if k not in data})
        _write_json(file_path, data)

        logger.info(f"Added item {file_path.relative_to(self.data_dir).as_posix()}")
        return file_path
