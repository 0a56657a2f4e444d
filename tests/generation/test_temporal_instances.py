from __future__ import annotations

import datetime as dt
import decimal
import ipaddress
import pathlib
import uuid

import pytest
from faker import Faker
from pydantic import SecretStr

from pydantic_forge.providers import temporal
from pydantic_forge.providers.instances import generate_instance
from pydantic_forge.schema import CoreSchemaNode
from pydantic_forge.schema.nodes import MISSING


@pytest.fixture
def faker() -> Faker:
    instance = Faker()
    instance.seed_instance(99)
    return instance


def test_date_within_bounds(faker: Faker) -> None:
    node = CoreSchemaNode({"type": "date", "ge": dt.date(2020, 1, 1), "lt": dt.date(2020, 1, 10)})

    for _ in range(30):
        value = temporal.generate_date(node, faker)
        assert dt.date(2020, 1, 1) <= value < dt.date(2020, 1, 10)


def test_datetime_lower_bound_only(faker: Faker) -> None:
    start = dt.datetime(2021, 6, 1, tzinfo=dt.timezone.utc)
    node = CoreSchemaNode({"type": "datetime", "gt": start})

    value = temporal.generate_datetime(node, faker)

    assert value > start
    assert value.tzinfo is not None


def test_datetime_naive_constraint(faker: Faker) -> None:
    node = CoreSchemaNode({"type": "datetime", "tz_constraint": "naive"})

    assert temporal.generate_datetime(node, faker).tzinfo is None


def test_datetime_aware_constraint(faker: Faker) -> None:
    node = CoreSchemaNode({"type": "datetime", "tz_constraint": "aware"})

    assert temporal.generate_datetime(node, faker).tzinfo is not None


def test_time_and_timedelta_bounds(faker: Faker) -> None:
    time_node = CoreSchemaNode({"type": "time", "ge": dt.time(9, 0), "le": dt.time(17, 0)})
    delta_node = CoreSchemaNode(
        {"type": "timedelta", "gt": dt.timedelta(hours=1), "le": dt.timedelta(hours=2)}
    )

    for _ in range(30):
        assert dt.time(9, 0) <= temporal.generate_time(time_node, faker) <= dt.time(17, 0)
        delta = temporal.generate_timedelta(delta_node, faker)
        assert dt.timedelta(hours=1) < delta <= dt.timedelta(hours=2)


@pytest.mark.parametrize(
    "cls",
    [
        ipaddress.IPv4Address,
        ipaddress.IPv6Address,
        ipaddress.IPv4Network,
        ipaddress.IPv6Interface,
        pathlib.Path,
        pathlib.PurePosixPath,
        uuid.UUID,
        decimal.Decimal,
        SecretStr,
        dt.datetime,
        dt.date,
        dt.time,
        dt.timedelta,
    ],
)
def test_recognized_instances(faker: Faker, cls: type) -> None:
    assert isinstance(generate_instance(cls, faker), cls)


def test_datetime_is_not_mistaken_for_date(faker: Faker) -> None:
    assert type(generate_instance(dt.date, faker)) is dt.date
    assert type(generate_instance(dt.datetime, faker)) is dt.datetime


def test_unknown_instances_are_missing(faker: Faker) -> None:
    class Widget:
        pass

    assert generate_instance(Widget, faker) is MISSING
    assert generate_instance(None, faker) is MISSING
