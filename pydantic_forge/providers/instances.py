"""Instances for ``is-instance`` nodes whose class has a natural fake value."""

from __future__ import annotations

import datetime as dt
import decimal
import ipaddress
import pathlib
import uuid
from collections.abc import Callable
from typing import Any

from faker import Faker
from pydantic import SecretBytes, SecretStr

from pydantic_forge.schema.nodes import MISSING

from .numbers import NumberBounds, generate_decimal
from .strings import random_uuid

InstanceFactory = Callable[[type[Any], Faker], Any]


def _path(cls: type[Any], faker: Faker) -> Any:
    return cls(faker.file_path(depth=faker.random.randint(1, 3)))


def _datetime(cls: type[Any], faker: Faker) -> Any:
    return faker.date_time(tzinfo=dt.timezone.utc)


def _timedelta(cls: type[Any], faker: Faker) -> Any:
    return dt.timedelta(seconds=faker.random.randint(0, 30 * 24 * 60 * 60))


# Order matters: datetime subclasses date, and the concrete ipaddress classes
# are tested before the abstract path bases.
_INSTANCE_FACTORIES: tuple[tuple[type[Any], InstanceFactory], ...] = (
    (ipaddress.IPv4Address, lambda cls, faker: ipaddress.IPv4Address(faker.ipv4())),
    (ipaddress.IPv6Address, lambda cls, faker: ipaddress.IPv6Address(faker.ipv6())),
    (ipaddress.IPv4Interface, lambda cls, faker: ipaddress.IPv4Interface(faker.ipv4(network=True))),
    (ipaddress.IPv6Interface, lambda cls, faker: ipaddress.IPv6Interface(faker.ipv6(network=True))),
    (ipaddress.IPv4Network, lambda cls, faker: ipaddress.IPv4Network(faker.ipv4(network=True))),
    (ipaddress.IPv6Network, lambda cls, faker: ipaddress.IPv6Network(faker.ipv6(network=True))),
    (pathlib.PurePath, _path),
    (uuid.UUID, lambda cls, faker: random_uuid(faker.random)),
    (decimal.Decimal, lambda cls, faker: generate_decimal(NumberBounds(), faker.random)),
    (SecretStr, lambda cls, faker: SecretStr(faker.password())),
    (SecretBytes, lambda cls, faker: SecretBytes(faker.password().encode("utf-8"))),
    (dt.datetime, _datetime),
    (dt.date, lambda cls, faker: faker.date_object()),
    (dt.time, lambda cls, faker: faker.time_object()),
    (dt.timedelta, _timedelta),
)


def generate_instance(cls: type[Any] | None, faker: Faker) -> Any:
    """Return an instance of ``cls`` or ``MISSING`` when the class is not recognized."""

    if not isinstance(cls, type):
        return MISSING
    for owner, factory in _INSTANCE_FACTORIES:
        if issubclass(cls, owner):
            return factory(cls, faker)
    return MISSING


def supports_instance(cls: Any) -> bool:
    return isinstance(cls, type) and any(issubclass(cls, owner) for owner, _ in _INSTANCE_FACTORIES)


__all__ = ["InstanceFactory", "generate_instance", "supports_instance"]
