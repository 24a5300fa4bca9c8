"""
Board item schema and the date → bucket mapping.

Each month is split into four fixed day ranges:
  Week 1: days 1-7
  Week 2: days 8-14
  Week 3: days 15-21
  Week 4: days 22-end of month (8 to 10 days long)

Task files follow the naming convention
  <id><sep><YYYY-MM-DD>[-suffix].json
where <sep> is "-" or "___" and the suffix marks lifecycle state.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Dict, Any, NamedTuple, Tuple

DEADLINE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
TASK_FILENAME_RE = re.compile(r"(.+?)(?:___|-)([0-9]{4}-[0-9]{2}-[0-9]{2})(?:-[a-zA-Z]+)?\.json")

WEEK_START_DAYS = {1: 1, 2: 8, 3: 15, 4: 22}
WEEK_RANGE_LABELS = {1: "1–7", 2: "8–14", 3: "15–21", 4: "22–end"}

MONTH_NAMES = {
    1: "January", 2: "February", 3: "March", 4: "April",
    5: "May", 6: "June", 7: "July", 8: "August",
    9: "September", 10: "October", 11: "November", 12: "December",
}

BucketKey = Tuple[int, int]  # (month 1..12, week 1..4)


class FileSuffix(Enum):
    """Lifecycle markers appended to a task file name."""
    IMPORT_ME = "importMe"    # Created here, waiting for downstream import
    UPDATE_ME = "updateMe"    # Rescheduled copy, waiting for downstream update
    DEPRECATED = "depr"       # Superseded by a rescheduled copy


class TaskFileName(NamedTuple):
    """Parts recovered from a task file's basename."""
    item_id: str
    deadline: str
    separator: str

    def with_date(self, deadline: str, suffix: FileSuffix) -> str:
        return f"{self.item_id}{self.separator}{deadline}-{suffix.value}.json"


def week_bucket(day: int) -> int:
    """Map a day-of-month to week bucket 1..4."""
    if day <= 7:
        return 1
    if day <= 14:
        return 2
    if day <= 21:
        return 3
    return 4


def bucket_key(d: date) -> BucketKey:
    return (d.month, week_bucket(d.day))


def week_range_label(week: int) -> str:
    return WEEK_RANGE_LABELS[week]


def parse_deadline(value: Any) -> Optional[date]:
    """
    Parse a deadline field into a calendar date.

    Accepts "YYYY-MM-DD" and ISO-8601 date-times. The date is taken as
    written; an offset such as "Z" does not shift it.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def is_valid_deadline_format(value: str) -> bool:
    """Format check only: 2026-02-31 passes."""
    return bool(DEADLINE_RE.fullmatch(value or ""))


def parse_task_filename(basename: str) -> Optional[TaskFileName]:
    match = TASK_FILENAME_RE.fullmatch(basename)
    if not match:
        return None
    separator = "___" if "___" in basename else "-"
    return TaskFileName(item_id=match.group(1), deadline=match.group(2), separator=separator)


def bucket_deadline(year: int, month: int, week: int) -> date:
    """
    Date submitted when a user drops an item into (month, week).

    The bucket's first day is moved forward to the next Monday (or kept if
    it already is one) and the following Sunday is returned. For week 4 the
    result can fall in the next month.
    """
    start = date(year, month, WEEK_START_DAYS[week])
    monday = start + timedelta(days=(7 - start.weekday()) % 7)
    return monday + timedelta(days=6)


@dataclass
class BoardItem:
    """One task file placed on the board."""

    title: str
    file: str                   # Path relative to the data dir, "/" separated
    deadline: str               # YYYY-MM-DD
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def sort_key(self) -> Tuple[str, str]:
        return (self.deadline, self.title)

    @property
    def program(self) -> str:
        return str(self.raw.get("program") or "")

    @property
    def status(self) -> str:
        return str(self.raw.get("status") or "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "file": self.file,
            "deadline": self.deadline,
            "raw": self.raw,
        }


@dataclass
class ActionResult:
    """Outcome of a mutating request, serialised as {success, error?}."""
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.error is not None:
            data["error"] = self.error
        return data
