"""String, bytes, UUID and URL producers honouring declared constraints."""

from __future__ import annotations

import base64
import json
import random
import re
import string
import uuid
from collections.abc import Callable
from typing import Any

from faker import Faker

from pydantic_forge.core.constants import (
    STRING_DEFAULT_MAX,
    STRING_DEFAULT_MIN,
    STRING_MIN_ONLY_EXTRA,
)
from pydantic_forge.schema.nodes import MISSING, SchemaNode

_LOWER_ALNUM = string.ascii_lowercase + string.digits
_ALNUM = string.ascii_letters + string.digits
_NANOID_ALPHABET = _ALNUM + "_-"
_EMOJIS = ("😀", "😎", "🚀", "🌟", "🔥", "✨", "🎉", "💡")

_CHARACTER_CLASSES: tuple[tuple[tuple[str, ...], str], ...] = (
    ((r"\d", "[0-9]"), string.digits),
    (("[a-z]",), string.ascii_lowercase),
    (("[A-Z]",), string.ascii_uppercase),
    (("[0-9a-f]", "[a-f0-9]"), string.hexdigits[:16]),
    (("[0-9a-fA-F]", "[a-fA-F0-9]", "[0-9A-Fa-f]", "[A-Fa-f0-9]"), string.hexdigits),
    (("[a-zA-Z]", "[A-Za-z]"), string.ascii_letters),
    (("[a-zA-Z0-9]", "[A-Za-z0-9]", "[0-9a-zA-Z]"), _ALNUM),
    ((r"\w", "[a-zA-Z0-9_]", "[A-Za-z0-9_]"), _ALNUM + "_"),
)
_SINGLE_CLASS = re.compile(
    r"^\^(?P<cls>\\[dw]|\[[^\]]+\])(?P<quant>\+|\*|\{(?P<low>\d+)(?:,(?P<high>\d*))?\})\$$"
)
_LITERAL_HEAD = re.compile(r"^\^(?P<head>[A-Za-z0-9_\-:/#]+)(?P<rest>.*)$")
_UUID_SHAPE = "[0-9a-f]{8}-"


def random_text(rng: random.Random, alphabet: str, length: int) -> str:
    return "".join(rng.choice(alphabet) for _ in range(max(length, 0)))


def random_uuid(rng: random.Random, version: int = 4) -> uuid.UUID:
    """Draw a UUID from ``rng`` with RFC 4122 variant and ``version`` bits set."""

    value = rng.getrandbits(128)
    value &= ~(0xC000 << 48)
    value |= 0x8000 << 48
    value &= ~(0xF000 << 64)
    value |= version << 76
    return uuid.UUID(int=value)


def _duration(rng: random.Random) -> str:
    parts = [
        ("Y", rng.randint(0, 10)),
        ("M", rng.randint(0, 11)),
        ("D", rng.randint(0, 30)),
    ]
    clock = [
        ("H", rng.randint(0, 23)),
        ("M", rng.randint(0, 59)),
        ("S", rng.randint(0, 59)),
    ]
    result = "P" + "".join(f"{value}{unit}" for unit, value in parts if value)
    if any(value for _, value in clock):
        result += "T" + "".join(f"{value}{unit}" for unit, value in clock if value)
    return "PT0S" if result == "P" else result


def _jwt(faker: Faker) -> str:
    def encode(payload: dict[str, Any]) -> str:
        raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    header = encode({"alg": "HS256", "typ": "JWT"})
    body = encode({"sub": str(random_uuid(faker.random)), "iat": faker.unix_time()})
    return f"{header}.{body}.{random_text(faker.random, _ALNUM, 43)}"


def _e164(rng: random.Random) -> str:
    head = rng.choice("123456789")
    return f"+{head}{random_text(rng, string.digits, rng.randint(10, 13))}"


FORMAT_GENERATORS: dict[str, Callable[[Faker], str]] = {
    "email": lambda faker: faker.email(),
    "name-email": lambda faker: f"{faker.name()} <{faker.email()}>",
    "uuid": lambda faker: str(random_uuid(faker.random)),
    "guid": lambda faker: str(random_uuid(faker.random)),
    "url": lambda faker: faker.url(),
    "uri": lambda faker: faker.url(),
    "ipv4": lambda faker: faker.ipv4(),
    "ipv6": lambda faker: faker.ipv6(),
    "cidrv4": lambda faker: faker.ipv4(network=True),
    "cidrv6": lambda faker: faker.ipv6(network=True),
    "cuid": lambda faker: "c" + random_text(faker.random, _LOWER_ALNUM, 24),
    "cuid2": lambda faker: random_text(faker.random, _LOWER_ALNUM, 24),
    "ulid": lambda faker: random_text(faker.random, _ALNUM, 26).upper(),
    "nanoid": lambda faker: random_text(faker.random, _NANOID_ALPHABET, 21),
    "xid": lambda faker: random_text(faker.random, _LOWER_ALNUM, 20),
    "ksuid": lambda faker: random_text(faker.random, _ALNUM, 27),
    "date": lambda faker: faker.date(),
    "date-time": lambda faker: faker.iso8601(),
    "datetime": lambda faker: faker.iso8601(),
    "time": lambda faker: faker.time(),
    "duration": lambda faker: _duration(faker.random),
    "e164": lambda faker: _e164(faker.random),
    "phone": lambda faker: _e164(faker.random),
    "base64": lambda faker: base64.b64encode(
        random_text(faker.random, _ALNUM, 16).encode("ascii")
    ).decode("ascii"),
    "base64url": lambda faker: base64.urlsafe_b64encode(
        random_text(faker.random, _ALNUM, 16).encode("ascii")
    ).decode("ascii"),
    "jwt": _jwt,
    "emoji": lambda faker: faker.random.choice(_EMOJIS),
    "hostname": lambda faker: faker.hostname(),
    "slug": lambda faker: faker.slug(),
}


def format_value(format_name: str | None, faker: Faker) -> Any:
    """Return a representative string for ``format_name`` or ``MISSING``."""

    if not format_name:
        return MISSING
    producer = FORMAT_GENERATORS.get(format_name.lower())
    if producer is None:
        return MISSING
    return producer(faker)


def target_length(node: SchemaNode, rng: random.Random) -> int:
    exact = node.check("length")
    if exact is not None:
        return int(exact)
    minimum = node.check("min_length")
    maximum = node.check("max_length")
    if minimum is not None and maximum is not None:
        return rng.randint(int(minimum), int(maximum))
    if minimum is not None:
        return int(minimum) + rng.randint(0, STRING_MIN_ONLY_EXTRA)
    if maximum is not None:
        return rng.randint(min(1, int(maximum)), int(maximum))
    return rng.randint(STRING_DEFAULT_MIN, STRING_DEFAULT_MAX)


def text_of_length(faker: Faker, length: int) -> str:
    """Readable text of exactly ``length`` characters, built from words then letters."""

    rng = faker.random
    result = ""
    while len(result) < length:
        remaining = length - len(result)
        if remaining > 10:
            result += f"{faker.word()} "
        else:
            result += random_text(rng, string.ascii_letters, remaining)
    result = result[:length]
    if result.endswith(" "):
        result = result[:-1] + rng.choice(string.ascii_letters)
    return result


def _class_alphabet(token: str) -> str | None:
    for spellings, alphabet in _CHARACTER_CLASSES:
        if token in spellings:
            return alphabet
    return None


def pattern_value(pattern: str, node: SchemaNode, faker: Faker) -> str:
    """Produce a candidate for one of the recognized pattern shapes."""

    rng = faker.random
    if "@" in pattern:
        return faker.email()
    if pattern == r"^[A-Z]{3}-\d{3}$":
        return (
            random_text(rng, string.ascii_uppercase, 3)
            + "-"
            + random_text(rng, string.digits, 3)
        )
    if _UUID_SHAPE in pattern.lower():
        return str(random_uuid(rng))

    match = _SINGLE_CLASS.match(pattern)
    if match:
        alphabet = _class_alphabet(match.group("cls"))
        if alphabet is not None:
            length = _quantified_length(match, node, rng)
            return random_text(rng, alphabet, length)

    head = _LITERAL_HEAD.match(pattern)
    if head:
        prefix = head.group("head")
        rest = head.group("rest")
        if rest == "$":
            return prefix
        tail = _SINGLE_CLASS.match("^" + rest)
        alphabet = _class_alphabet(tail.group("cls")) if tail else None
        if tail and alphabet is not None:
            length = _quantified_length(tail, node, rng, reserved=len(prefix))
            return prefix + random_text(rng, alphabet, length)
        length = target_length(node, rng)
        return prefix + random_text(rng, _ALNUM, max(length - len(prefix), 1))

    return random_text(rng, _ALNUM, target_length(node, rng))


def _quantified_length(
    match: re.Match[str], node: SchemaNode, rng: random.Random, reserved: int = 0
) -> int:
    quant = match.group("quant")
    low = match.group("low")
    if low is not None:
        high = match.group("high")
        if high is None:
            return int(low)
        upper = int(high) if high else int(low) + STRING_MIN_ONLY_EXTRA
        return rng.randint(int(low), upper)
    # ``reserved`` characters of the total length are taken by a literal prefix.
    length = max(target_length(node, rng) - reserved, 0)
    if quant == "+":
        return max(length, 1)
    return length


def generate_string(node: SchemaNode, faker: Faker) -> str:
    formatted = format_value(node.format, faker)
    if formatted is not MISSING:
        return formatted
    pattern = node.check("pattern")
    if pattern:
        return pattern_value(pattern, node, faker)
    return text_of_length(faker, target_length(node, faker.random))


def generate_bytes(node: SchemaNode, faker: Faker) -> bytes:
    length = target_length(node, faker.random)
    return random_text(faker.random, _ALNUM, length).encode("ascii")


def generate_uuid(node: SchemaNode, faker: Faker) -> uuid.UUID:
    version = node.check("version") or 4
    return random_uuid(faker.random, int(version))


def generate_url(node: SchemaNode, faker: Faker) -> str:
    schemes = node.check("allowed_schemes")
    if schemes:
        return faker.url(schemes=list(schemes))
    return faker.url()


__all__ = [
    "FORMAT_GENERATORS",
    "format_value",
    "generate_bytes",
    "generate_string",
    "generate_url",
    "generate_uuid",
    "pattern_value",
    "random_text",
    "random_uuid",
    "target_length",
    "text_of_length",
]
