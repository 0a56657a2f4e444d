from __future__ import annotations

import base64
import re
import uuid

import pytest
from faker import Faker

from pydantic_forge.providers import strings as strings_mod
from pydantic_forge.schema import CoreSchemaNode
from pydantic_forge.schema.nodes import MISSING


def _str_node(**constraints: object) -> CoreSchemaNode:
    return CoreSchemaNode({"type": "str", **constraints})


@pytest.fixture
def faker() -> Faker:
    instance = Faker()
    instance.seed_instance(1234)
    return instance


def test_exact_length_wins(faker: Faker) -> None:
    node = _str_node(min_length=10, max_length=10)

    assert all(len(strings_mod.generate_string(node, faker)) == 10 for _ in range(50))


def test_length_within_bounds(faker: Faker) -> None:
    node = _str_node(min_length=5, max_length=10)

    for _ in range(50):
        assert 5 <= len(strings_mod.generate_string(node, faker)) <= 10


def test_min_only_and_max_only_lengths(faker: Faker) -> None:
    for _ in range(30):
        assert 50 <= len(strings_mod.generate_string(_str_node(min_length=50), faker)) <= 60
        assert 1 <= len(strings_mod.generate_string(_str_node(max_length=3), faker)) <= 3


def test_default_length_range(faker: Faker) -> None:
    for _ in range(30):
        assert 5 <= len(strings_mod.generate_string(_str_node(), faker)) <= 20


def test_text_never_ends_with_space(faker: Faker) -> None:
    for length in range(1, 40):
        value = strings_mod.text_of_length(faker, length)
        assert len(value) == length
        assert not value.endswith(" ")


@pytest.mark.parametrize(
    ("format_name", "check"),
    [
        ("email", lambda value: "@" in value),
        ("name-email", lambda value: re.fullmatch(r".+ <.+@.+>", value)),
        ("uuid", lambda value: uuid.UUID(value).version == 4),
        ("url", lambda value: value.startswith("http")),
        ("ipv4", lambda value: value.count(".") == 3),
        ("cidrv4", lambda value: "/" in value),
        ("cuid", lambda value: value.startswith("c") and len(value) == 25),
        ("ulid", lambda value: len(value) == 26 and value == value.upper()),
        ("nanoid", lambda value: len(value) == 21),
        ("date", lambda value: re.fullmatch(r"\d{4}-\d{2}-\d{2}", value)),
        ("duration", lambda value: value.startswith("P")),
        ("e164", lambda value: re.fullmatch(r"\+[1-9]\d{10,13}", value)),
        ("base64", lambda value: base64.b64decode(value)),
        ("jwt", lambda value: value.count(".") == 2),
        ("hostname", lambda value: "." in value),
    ],
)
def test_recognized_formats(faker: Faker, format_name: str, check) -> None:
    value = strings_mod.format_value(format_name, faker)

    assert isinstance(value, str)
    assert check(value)


def test_unknown_format_is_missing(faker: Faker) -> None:
    assert strings_mod.format_value("payment-card", faker) is MISSING
    assert strings_mod.format_value(None, faker) is MISSING


@pytest.mark.parametrize(
    "pattern",
    [
        r"^[A-Z]{3}-\d{3}$",
        r"^\d{6}$",
        r"^[a-z]+$",
        r"^[A-Z]{2,4}$",
        r"^[0-9a-f]{12}$",
        r"^[a-zA-Z0-9_]+$",
        r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    ],
)
def test_recognized_patterns_match(faker: Faker, pattern: str) -> None:
    node = _str_node(pattern=pattern)

    for _ in range(20):
        assert re.fullmatch(pattern, strings_mod.generate_string(node, faker))


def test_literal_prefix_pattern(faker: Faker) -> None:
    node = _str_node(pattern="^FIX", min_length=5)

    value = strings_mod.generate_string(node, faker)

    assert value.startswith("FIX")
    assert len(value) >= 5


@pytest.mark.parametrize(
    "pattern",
    [r"^ID-[0-9]+$", r"^FIX[a-z]{4}$", r"^SKU\d{2,5}$", r"^v[A-Za-z0-9]*$", r"^DONE$"],
)
def test_literal_prefix_with_class_tail_matches(faker: Faker, pattern: str) -> None:
    node = _str_node(pattern=pattern)

    for _ in range(20):
        assert re.fullmatch(pattern, strings_mod.generate_string(node, faker))


def test_literal_prefix_tail_shares_length_budget(faker: Faker) -> None:
    node = _str_node(pattern=r"^ID-[0-9]+$", min_length=6, max_length=8)

    for _ in range(20):
        value = strings_mod.generate_string(node, faker)
        assert re.fullmatch(r"ID-[0-9]+", value)
        assert 6 <= len(value) <= 8


def test_email_like_pattern(faker: Faker) -> None:
    value = strings_mod.generate_string(_str_node(pattern=r"^\S+@\S+$"), faker)

    assert "@" in value


def test_unrecognized_pattern_falls_back_to_alphanumerics(faker: Faker) -> None:
    value = strings_mod.generate_string(_str_node(pattern=r"(ab|cd)+x?"), faker)

    assert value.isalnum()


def test_uuid_version_is_honoured(faker: Faker) -> None:
    node = CoreSchemaNode({"type": "uuid", "version": 7})

    assert strings_mod.generate_uuid(node, faker).version == 7
    assert strings_mod.generate_uuid(CoreSchemaNode({"type": "uuid"}), faker).version == 4


def test_url_respects_allowed_schemes(faker: Faker) -> None:
    node = CoreSchemaNode({"type": "url", "allowed_schemes": ["ftp"]})

    assert strings_mod.generate_url(node, faker).startswith("ftp://")


def test_bytes_length(faker: Faker) -> None:
    node = CoreSchemaNode({"type": "bytes", "min_length": 4, "max_length": 4})

    assert len(strings_mod.generate_bytes(node, faker)) == 4
