"""Trigger-time resolution for locally scheduled notifications"""

import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union

from budget_notifier.domain.exceptions import ScheduleWindowError
from budget_notifier.utils.date_utils import js_weekday

MIN_HOUR = 9  # 9 AM
MAX_HOUR = 20  # 8 PM
DEFAULT_HOUR = 9


@dataclass(frozen=True)
class AbsoluteSchedule:
    """Fire at a fixed local timestamp"""

    when: datetime


@dataclass(frozen=True)
class WeeklySchedule:
    """Fire at the next given weekday (0=Sunday) at hour:minute"""

    weekday: int
    hour: int = DEFAULT_HOUR
    minute: int = 0


@dataclass(frozen=True)
class DailySchedule:
    """Fire at the next hour:minute, today or tomorrow"""

    hour: int = DEFAULT_HOUR
    minute: int = 0


ScheduleSpec = Union[AbsoluteSchedule, WeeklySchedule, DailySchedule]


def validate_hour(schedule: ScheduleSpec) -> None:
    """Reject explicit hours outside [MIN_HOUR, MAX_HOUR]"""
    hour = getattr(schedule, "hour", None)
    if hour is not None and not MIN_HOUR <= hour <= MAX_HOUR:
        raise ScheduleWindowError(f"Hour must be between {MIN_HOUR} and {MAX_HOUR}, got {hour}")


def next_time(hour: int, minute: int, now: datetime) -> datetime:
    """Next occurrence of hour:minute strictly after now"""
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return target


def next_weekday(weekday: int, hour: int, minute: int, now: datetime) -> datetime:
    """Next occurrence of weekday at hour:minute strictly after now"""
    if not 0 <= weekday <= 6:
        raise ValueError(f"Weekday must be between 0 and 6, got {weekday}")
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    while js_weekday(target) != weekday or target <= now:
        target += timedelta(days=1)
    return target


def resolve_trigger(schedule: ScheduleSpec, now: datetime) -> datetime:
    """
    Resolve a schedule to a concrete local trigger time.

    A non-future result is advanced by exactly one calendar day so the
    wall-clock time of day is preserved.
    """
    if isinstance(schedule, AbsoluteSchedule):
        target = schedule.when
    elif isinstance(schedule, WeeklySchedule):
        target = next_weekday(schedule.weekday, schedule.hour, schedule.minute, now)
    else:
        target = next_time(schedule.hour, schedule.minute, now)

    if target <= now:
        target += timedelta(days=1)
    return target


def delay_seconds(trigger: datetime, now: datetime) -> int:
    """
    Whole seconds of elapsed time from now until trigger.

    Goes through POSIX timestamps so a daylight-saving change between the
    two keeps the wall-clock trigger time.
    """
    return int(trigger.timestamp() - now.timestamp())


def random_hour(rng: random.Random) -> int:
    return rng.randint(MIN_HOUR, MAX_HOUR)


def random_minute(rng: random.Random) -> int:
    return rng.randint(0, 59)


def random_weekday(rng: random.Random) -> int:
    return rng.randint(0, 6)


def random_daily_slot(rng: random.Random) -> DailySchedule:
    return DailySchedule(hour=random_hour(rng), minute=random_minute(rng))


def random_weekly_slot(rng: random.Random) -> WeeklySchedule:
    hour = random_hour(rng)
    minute = random_minute(rng)
    return WeeklySchedule(weekday=random_weekday(rng), hour=hour, minute=minute)
