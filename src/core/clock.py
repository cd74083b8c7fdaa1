"""
Clock — источник текущего времени

Ядро никогда не вызывает datetime.now() напрямую: время передаётся через Clock,
чтобы completed_at и сравнения сроков были детерминированы в тестах.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Источник "сейчас"."""

    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Системное время (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Фиксированное время для тестов; сдвигается явно через advance()."""

    def __init__(self, current: datetime):
        self._current = current

    def now(self) -> datetime:
        return self._current

    def today(self) -> date:
        return self._current.date()

    def advance(self, delta: timedelta) -> None:
        self._current = self._current + delta

    def set(self, current: datetime) -> None:
        self._current = current
