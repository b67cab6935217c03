"""
Wall-clock scheduling of rotations

The writer only needs ``schedule(expression, callback)``; any object with
that shape (and a ``stop()``) can be passed in place of ``ThreadScheduler``,
for example an adapter over croniter or APScheduler. ``ThreadScheduler`` is
the small built-in default used when no scheduler is given.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Protocol, Set, Tuple

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# (name, min, max) for the five cron fields
_FIELDS: Tuple[Tuple[str, int, int], ...] = (
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day of month", 1, 31),
    ("month", 1, 12),
    ("day of week", 0, 7),
)

# Longest search before giving up on an expression that never fires
_MAX_LOOKAHEAD = timedelta(days=366 * 5)


class Scheduler(Protocol):
    """Anything that can call back at cron boundaries"""

    def schedule(self, expression: str, callback: Callable[[], object]) -> None:
        ...

    def stop(self) -> None:
        ...


def _parse_field(text: str, name: str, low: int, high: int) -> Set[int]:
    values: Set[int] = set()
    for part in text.split(","):
        step = 1
        if "/" in part:
            part, step_text = part.split("/", 1)
            try:
                step = int(step_text)
            except ValueError:
                raise ConfigError(f"invalid step in {name} field: {text!r}") from None
            if step <= 0:
                raise ConfigError(f"invalid step in {name} field: {text!r}")

        if part == "*":
            start, end = low, high
        elif "-" in part:
            first, last = part.split("-", 1)
            try:
                start, end = int(first), int(last)
            except ValueError:
                raise ConfigError(f"invalid range in {name} field: {text!r}") from None
        else:
            try:
                start = int(part)
            except ValueError:
                raise ConfigError(f"invalid value in {name} field: {text!r}") from None
            end = high if step > 1 else start

        if start < low or end > high or start > end:
            raise ConfigError(f"{name} field out of range: {text!r}")
        values.update(range(start, end + 1, step))
    return values


class CronExpression:
    """
    Five field cron expression (minute hour day-of-month month day-of-week)

    Supports ``*``, ``*/n``, ``a``, ``a-b``, ``a-b/n`` and comma separated
    lists. Day of week 0 and 7 both mean Sunday.
    """

    def __init__(self, expression: str):
        parts = expression.split()
        if len(parts) != 5:
            raise ConfigError(f"cron expression needs 5 fields: {expression!r}")

        self.expression = expression
        fields = [
            _parse_field(part, name, low, high)
            for part, (name, low, high) in zip(parts, _FIELDS)
        ]
        self.minutes, self.hours, self.days, self.months, weekdays = fields
        self.weekdays = {d % 7 for d in weekdays}
        self._any_day = parts[2] == "*"
        self._any_weekday = parts[4] == "*"

    def _day_matches(self, dt: datetime) -> bool:
        dom = dt.day in self.days
        dow = (dt.weekday() + 1) % 7 in self.weekdays
        if self._any_day and self._any_weekday:
            return True
        if self._any_day:
            return dow
        if self._any_weekday:
            return dom
        return dom or dow

    def next_after(self, dt: datetime) -> datetime:
        """First matching minute strictly after ``dt``"""
        t = dt.replace(second=0, microsecond=0) + timedelta(minutes=1)
        limit = dt + _MAX_LOOKAHEAD

        while t <= limit:
            if t.month not in self.months:
                if t.month == 12:
                    t = t.replace(year=t.year + 1, month=1, day=1, hour=0, minute=0)
                else:
                    t = t.replace(month=t.month + 1, day=1, hour=0, minute=0)
                continue
            if not self._day_matches(t):
                t = t.replace(hour=0, minute=0) + timedelta(days=1)
                continue
            if t.hour not in self.hours:
                t = t.replace(minute=0) + timedelta(hours=1)
                continue
            if t.minute not in self.minutes:
                t += timedelta(minutes=1)
                continue
            return t

        raise ConfigError(f"cron expression never fires: {self.expression!r}")

    def __repr__(self) -> str:
        return f"CronExpression({self.expression!r})"


class ThreadScheduler:
    """
    Runs each scheduled callback on its own daemon thread

    Callback exceptions are logged and the job keeps running.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or datetime.now
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()

    def schedule(self, expression: str, callback: Callable[[], object]) -> None:
        cron = CronExpression(expression)
        with self._lock:
            if self._stop.is_set():
                raise RuntimeError("scheduler is stopped")
            thread = threading.Thread(
                target=self._run,
                args=(cron, callback),
                daemon=True,
                name=f"filerotate-cron-{len(self._threads)}",
            )
            self._threads.append(thread)
        thread.start()

    def _run(self, cron: CronExpression, callback: Callable[[], object]) -> None:
        fire_at = cron.next_after(self._clock())
        while not self._stop.is_set():
            remaining = (fire_at - self._clock()).total_seconds()
            if remaining > 0:
                if self._stop.wait(remaining):
                    return
                continue
            try:
                callback()
            except Exception:
                logger.exception("Scheduled job %r failed", cron.expression)
            fire_at = cron.next_after(max(fire_at, self._clock()))

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            if thread is not threading.current_thread():
                thread.join(timeout)

    @property
    def running(self) -> bool:
        return not self._stop.is_set()
