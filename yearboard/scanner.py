"""
Data directory scan.

Reads every *.json file at the top of the data directory and one level of
subdirectories below it, and places each item in its (month, week) bucket
for the requested year. Problems become warnings, never exceptions.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Any

from .schema import BoardItem, BucketKey, bucket_key, parse_deadline

logger = logging.getLogger(__name__)


def _empty_buckets() -> Dict[BucketKey, List[BoardItem]]:
    return {(m, w): [] for m in range(1, 13) for w in range(1, 5)}


@dataclass
class BoardScan:
    """Result of scanning the data directory for one year."""
    year: int
    items: Dict[BucketKey, List[BoardItem]] = field(default_factory=_empty_buckets)
    warnings: List[str] = field(default_factory=list)
    programs: List[str] = field(default_factory=list)

    def bucket(self, month: int, week: int) -> List[BoardItem]:
        return self.items[(month, week)]

    def month_count(self, month: int) -> int:
        return sum(len(self.items[(month, w)]) for w in range(1, 5))

    @property
    def total(self) -> int:
        return sum(len(b) for b in self.items.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "buckets": {
                f"{m}-{w}": [item.to_dict() for item in bucket]
                for (m, w), bucket in self.items.items()
            },
            "programs": self.programs,
            "warnings": self.warnings,
            "total": self.total,
        }


def list_task_files(data_dir: Path) -> List[Path]:
    """Top-level files first, then one level of subdirectories."""
    return sorted(data_dir.glob("*.json")) + sorted(data_dir.glob("*/*.json"))


def relative_name(path: Path, data_dir: Path) -> str:
    return path.relative_to(data_dir).as_posix()


def item_title(data: Dict[str, Any], path: Path) -> str:
    for key in ("title", "name"):
        if data.get(key) is not None:
            return str(data[key])
    return path.stem


def scan_board(data_dir, year: int, only_this_year: bool = True) -> BoardScan:
    """Scan data_dir and bucket every item whose deadline falls in year."""
    data_dir = Path(data_dir)
    scan = BoardScan(year=year)
    programs = set()

    if not data_dir.is_dir():
        scan.warnings.append(f"Data directory not found: {data_dir}")
        logger.warning(scan.warnings[-1])
        return scan

    for path in list_task_files(data_dir):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            scan.warnings.append(f"Could not read: {path.name}")
            logger.warning(f"Could not read {path}: {e}")
            continue

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            scan.warnings.append(f"Invalid JSON: {path.name}")
            logger.warning(f"Invalid JSON in {path}")
            continue

        # "0" counts as no program, like an empty value
        program = data.get("program")
        if program and program != "0":
            programs.add(str(program))

        rel = relative_name(path, data_dir)
        if data.get("deadline") is None:
            continue
        deadline = parse_deadline(data["deadline"])
        if deadline is None:
            scan.warnings.append(f"Invalid deadline: {rel}")
            logger.warning(f"Invalid deadline {data['deadline']!r} in {rel}")
            continue

        if only_this_year and deadline.year != year:
            continue

        scan.items[bucket_key(deadline)].append(BoardItem(
            title=item_title(data, path),
            file=rel,
            deadline=deadline.isoformat(),
            raw=data,
        ))

    for bucket in scan.items.values():
        bucket.sort(key=lambda item: item.sort_key)
    scan.programs = sorted(programs)
    return scan
