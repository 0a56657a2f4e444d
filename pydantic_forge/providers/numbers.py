"""Numeric producers for int, float and decimal nodes."""

from __future__ import annotations

import decimal
import math
import random
from dataclasses import dataclass
from typing import Any

from pydantic_forge.core.constants import (
    DECIMAL_DEFAULT_PLACES,
    EXCLUSIVE_BOUND_EPSILON,
    NUMBER_DEFAULT_MAX,
    NUMBER_DEFAULT_MIN,
    NUMBER_DEFAULT_SPAN,
)
from pydantic_forge.schema.nodes import SchemaNode


@dataclass(slots=True)
class NumberBounds:
    """Declared numeric constraints read off a node's checks."""

    ge: Any = None
    gt: Any = None
    le: Any = None
    lt: Any = None
    multiple_of: Any = None
    max_digits: int | None = None
    decimal_places: int | None = None

    @classmethod
    def from_node(cls, node: SchemaNode) -> NumberBounds:
        return cls(
            ge=node.check("ge"),
            gt=node.check("gt"),
            le=node.check("le"),
            lt=node.check("lt"),
            multiple_of=node.check("multiple_of"),
            max_digits=node.check("max_digits"),
            decimal_places=node.check("decimal_places"),
        )


def generate_number(node: SchemaNode, rng: random.Random) -> Any:
    bounds = NumberBounds.from_node(node)
    if node.kind == "int":
        return generate_int(bounds, rng)
    if node.kind == "float":
        return generate_float(bounds, rng)
    if node.kind == "decimal":
        return generate_decimal(bounds, rng)
    raise ValueError(f"Unsupported numeric kind: {node.kind}")


def _fill_range(minimum: Any, maximum: Any) -> tuple[Any, Any]:
    if minimum is None and maximum is None:
        return NUMBER_DEFAULT_MIN, NUMBER_DEFAULT_MAX
    if maximum is None:
        return minimum, minimum + NUMBER_DEFAULT_SPAN
    if minimum is None:
        return maximum - NUMBER_DEFAULT_SPAN, maximum
    if minimum > maximum:
        return maximum, maximum
    return minimum, maximum


def generate_int(bounds: NumberBounds, rng: random.Random) -> int:
    minimum: int | None = None
    maximum: int | None = None
    if bounds.ge is not None:
        minimum = math.ceil(bounds.ge)
    if bounds.gt is not None:
        minimum = math.floor(bounds.gt) + 1
    if bounds.le is not None:
        maximum = math.floor(bounds.le)
    if bounds.lt is not None:
        maximum = math.ceil(bounds.lt) - 1
    minimum, maximum = _fill_range(minimum, maximum)

    step = bounds.multiple_of
    if step:
        return int(_snap_to_step(minimum, maximum, step, rng, integer=True))
    return rng.randint(minimum, maximum)


def generate_float(bounds: NumberBounds, rng: random.Random) -> float:
    minimum: float | None = None
    maximum: float | None = None
    if bounds.ge is not None:
        minimum = float(bounds.ge)
    if bounds.gt is not None:
        minimum = float(bounds.gt) + EXCLUSIVE_BOUND_EPSILON
    if bounds.le is not None:
        maximum = float(bounds.le)
    if bounds.lt is not None:
        maximum = float(bounds.lt) - EXCLUSIVE_BOUND_EPSILON
    minimum, maximum = _fill_range(minimum, maximum)

    step = bounds.multiple_of
    if step:
        return float(_snap_to_step(minimum, maximum, float(step), rng, integer=False))
    return rng.uniform(minimum, maximum)


def _snap_to_step(
    minimum: float,
    maximum: float,
    step: float,
    rng: random.Random,
    *,
    integer: bool,
) -> float:
    step = abs(step)
    low = math.ceil(minimum / step)
    high = math.floor(maximum / step)
    if low <= high:
        value = rng.randint(low, high) * step
    else:
        candidate = rng.uniform(minimum, maximum)
        value = round(candidate / step) * step
    if integer:
        value = math.floor(value)
    # -0.0 compares equal to 0 but renders as "-0.0"
    return value + 0.0 if value == 0 else value


def generate_decimal(bounds: NumberBounds, rng: random.Random) -> decimal.Decimal:
    decimal_places = bounds.decimal_places
    if decimal_places is None:
        decimal_places = DECIMAL_DEFAULT_PLACES
    quantizer = decimal.Decimal(1).scaleb(-decimal_places)

    minimum: decimal.Decimal | None = None
    maximum: decimal.Decimal | None = None
    if bounds.ge is not None:
        minimum = decimal.Decimal(str(bounds.ge))
    if bounds.gt is not None:
        minimum = decimal.Decimal(str(bounds.gt)) + quantizer
    if bounds.le is not None:
        maximum = decimal.Decimal(str(bounds.le))
    if bounds.lt is not None:
        maximum = decimal.Decimal(str(bounds.lt)) - quantizer
    minimum, maximum = _fill_range(minimum, maximum)
    minimum = decimal.Decimal(minimum)
    maximum = decimal.Decimal(maximum)

    if bounds.max_digits is not None:
        integer_digits = max(bounds.max_digits - decimal_places, 1)
        limit = decimal.Decimal(10) ** integer_digits - quantizer
        maximum = min(maximum, limit)
        minimum = max(minimum, -limit)
        if minimum > maximum:
            minimum = maximum

    if bounds.multiple_of:
        step = abs(decimal.Decimal(str(bounds.multiple_of)))
    else:
        step = quantizer
    lower_steps = int((minimum / step).to_integral_value(rounding=decimal.ROUND_CEILING))
    upper_steps = int((maximum / step).to_integral_value(rounding=decimal.ROUND_FLOOR))
    if lower_steps > upper_steps:
        lower_steps = upper_steps

    value = step * decimal.Decimal(rng.randint(lower_steps, upper_steps))
    if value.is_zero():
        value = abs(value)
    return value.quantize(quantizer, rounding=decimal.ROUND_HALF_UP)


__all__ = [
    "NumberBounds",
    "generate_decimal",
    "generate_float",
    "generate_int",
    "generate_number",
]
