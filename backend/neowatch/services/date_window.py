"""
Active time window for close approach events.

The window is the current calendar week: Monday of the current week up to,
but not including, the following Monday. "Now" is captured once when the
window is built so a single ranking call sees one consistent window.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union


@dataclass(frozen=True)
class DateWindow:
    start: date
    end: date  # exclusive

    @classmethod
    def current_week(cls, now: Optional[datetime] = None) -> "DateWindow":
        if now is None:
            now = datetime.now(timezone.utc)
        today = now.date() if isinstance(now, datetime) else now
        monday = today - timedelta(days=today.weekday())
        return cls(start=monday, end=monday + timedelta(days=7))

    def contains(self, when: Union[date, datetime]) -> bool:
        if isinstance(when, datetime):
            when = when.date()
        return self.start <= when < self.end

    is_in_window = contains

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{(self.end - timedelta(days=1)).isoformat()}"
