"""Date and time producers honouring declared bounds."""

from __future__ import annotations

import datetime as dt
import math
import random
from typing import Any

from faker import Faker

from pydantic_forge.schema.nodes import SchemaNode

_DEFAULT_WINDOW = dt.timedelta(days=365 * 5)
_SECONDS_PER_DAY = 24 * 60 * 60
_TIMEDELTA_WINDOW_DAYS = 30


def _tz_for(constraint: Any, bound: Any) -> dt.tzinfo | None:
    bound_tz = getattr(bound, "tzinfo", None)
    if bound_tz is not None:
        return bound_tz
    if constraint == "aware":
        return dt.timezone.utc
    if isinstance(constraint, int) and not isinstance(constraint, bool):
        return dt.timezone(dt.timedelta(seconds=constraint))
    return None


def _window(
    lower: Any,
    upper: Any,
    default_end: Any,
    span: dt.timedelta,
) -> tuple[Any, Any]:
    if lower is None and upper is None:
        return default_end - span, default_end
    if upper is None:
        return lower, lower + span
    if lower is None:
        return upper - span, upper
    if lower > upper:
        return upper, upper
    return lower, upper


def generate_date(node: SchemaNode, faker: Faker) -> dt.date:
    lower = node.check("ge")
    if node.check("gt") is not None:
        lower = node.check("gt") + dt.timedelta(days=1)
    upper = node.check("le")
    if node.check("lt") is not None:
        upper = node.check("lt") - dt.timedelta(days=1)
    start, end = _window(lower, upper, dt.date.today(), _DEFAULT_WINDOW)
    return faker.date_between_dates(date_start=start, date_end=end)


def generate_datetime(node: SchemaNode, faker: Faker) -> dt.datetime:
    lower = node.check("ge")
    if node.check("gt") is not None:
        lower = node.check("gt") + dt.timedelta(seconds=1)
    upper = node.check("le")
    if node.check("lt") is not None:
        upper = node.check("lt") - dt.timedelta(seconds=1)
    tzinfo = _tz_for(node.check("timezone"), lower if lower is not None else upper)
    now = dt.datetime.now(tzinfo) if tzinfo is not None else dt.datetime.now()
    start, end = _window(lower, upper, now, _DEFAULT_WINDOW)
    value = faker.date_time_between_dates(datetime_start=start, datetime_end=end, tzinfo=tzinfo)
    if node.check("timezone") == "naive" and value.tzinfo is not None:
        value = value.replace(tzinfo=None)
    return value


def _seconds(value: dt.time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def generate_time(node: SchemaNode, faker: Faker) -> dt.time:
    rng = faker.random
    lower = 0
    upper = _SECONDS_PER_DAY - 1
    if node.check("ge") is not None:
        lower = _seconds(node.check("ge"))
    if node.check("gt") is not None:
        lower = _seconds(node.check("gt")) + 1
    if node.check("le") is not None:
        upper = _seconds(node.check("le"))
    if node.check("lt") is not None:
        upper = _seconds(node.check("lt")) - 1
    if lower > upper:
        lower = upper
    seconds = rng.randint(max(lower, 0), min(upper, _SECONDS_PER_DAY - 1))
    return dt.time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)


def generate_timedelta(node: SchemaNode, faker: Faker) -> dt.timedelta:
    rng: random.Random = faker.random
    lower: float | None = None
    upper: float | None = None
    if node.check("ge") is not None:
        lower = node.check("ge").total_seconds()
    if node.check("gt") is not None:
        lower = node.check("gt").total_seconds() + 1
    if node.check("le") is not None:
        upper = node.check("le").total_seconds()
    if node.check("lt") is not None:
        upper = node.check("lt").total_seconds() - 1
    span = float(_TIMEDELTA_WINDOW_DAYS * _SECONDS_PER_DAY)
    start, end = _window(lower, upper, span, span)
    low, high = math.ceil(start), math.floor(end)
    if low > high:
        return dt.timedelta(seconds=start)
    return dt.timedelta(seconds=rng.randint(low, high))


__all__ = ["generate_date", "generate_datetime", "generate_time", "generate_timedelta"]
