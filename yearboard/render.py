"""
View model for the year board page.

Turns a BoardScan into the month/week columns the template iterates over,
with "today" highlighting when the viewed year is the current one.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from .scanner import BoardScan
from .schema import BoardItem, MONTH_NAMES, bucket_deadline, week_bucket, week_range_label


def today_in(tz_name: str) -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


@dataclass
class WeekColumn:
    week: int
    label: str
    items: List[BoardItem]
    is_current: bool = False


@dataclass
class MonthColumn:
    month: int
    name: str
    weeks: List[WeekColumn]
    is_past: bool = False
    is_current: bool = False

    @property
    def count(self) -> int:
        return sum(len(w.items) for w in self.weeks)

    @property
    def count_label(self) -> str:
        return f"{self.count} item" if self.count == 1 else f"{self.count} items"

    @property
    def css_class(self) -> str:
        classes = ["month"]
        if self.is_past:
            classes.append("month--past")
        if self.is_current:
            classes.append("month--current")
        return " ".join(classes)


@dataclass
class BoardView:
    year: int
    current_year: int
    months: List[MonthColumn]
    warnings: List[str] = field(default_factory=list)
    programs: List[str] = field(default_factory=list)
    deadlines: Dict[int, Dict[int, str]] = field(default_factory=dict)
    data_dir_name: str = "data"

    @property
    def prev_year(self) -> int:
        return self.year - 1

    @property
    def next_year(self) -> int:
        return self.year + 1

    @property
    def is_this_year(self) -> bool:
        return self.year == self.current_year


def bucket_deadline_table(year: int) -> Dict[int, Dict[int, str]]:
    """Date the modals submit for each (month, week) choice."""
    return {
        m: {w: bucket_deadline(year, m, w).isoformat() for w in range(1, 5)}
        for m in range(1, 13)
    }


def build_board_view(scan: BoardScan, today: date, data_dir_name: str = "data") -> BoardView:
    current_month: Optional[int] = None
    current_week: Optional[int] = None
    if scan.year == today.year:
        current_month = today.month
        current_week = week_bucket(today.day)

    months = []
    for m in range(1, 13):
        weeks = [
            WeekColumn(
                week=w,
                label=week_range_label(w),
                items=scan.bucket(m, w),
                is_current=(m == current_month and w == current_week),
            )
            for w in range(1, 5)
        ]
        months.append(MonthColumn(
            month=m,
            name=MONTH_NAMES[m],
            weeks=weeks,
            is_past=current_month is not None and m < current_month,
            is_current=m == current_month,
        ))

    return BoardView(
        year=scan.year,
        current_year=today.year,
        months=months,
        warnings=scan.warnings,
        programs=scan.programs,
        deadlines=bucket_deadline_table(scan.year),
        data_dir_name=data_dir_name,
    )
