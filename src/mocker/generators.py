"""
Value generators: one small dataclass per algorithm.

A generator only holds its parameters and, where the algorithm needs it, a
private counter. `next_value` dispatches on the generator type and is handed
the run's RandomSource on every call.

Integer arithmetic follows signed 64-bit two's-complement rules so that the
same random sequence always produces the same values: products wrap, the
absolute value of the most negative draw stays negative, and remainders take
the sign of the dividend.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np

from .errors import GenerationError
from .models import INT_MAX, INT_MIN, LONG_MAX, LONG_MIN, FieldKind
from .random_source import RandomSource

ALPHABET = (
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "áéíóúàèìòù"
    "0123456789"
    "_&%"
)


@dataclass
class RandomRange:
    """Uniform integer in [lower, lower + width), multiplied by scale."""
    lower: int
    width: int
    scale: int
    kind: FieldKind


@dataclass
class IncrementRange:
    """Counter starting at the lower bound, multiplied by scale; never wraps."""
    counter: int
    scale: int
    kind: FieldKind


@dataclass
class DateBucket:
    """Random day from a span split into buckets of `scale` days, as YYYYMMDD."""
    lower_date: date
    days_width: int
    scale: int
    bucket_count: int
    fallback: int  # returned for every draw when bucket_count is 0
    kind: FieldKind


@dataclass
class ExplicitSetRandom:
    """Uniform pick from a fixed list."""
    values: List[Any]


@dataclass
class ExplicitSetRotate:
    """Cycles through a fixed list in order."""
    values: List[Any]
    index: int = 0


@dataclass
class UniformDecimal:
    """fraction * width / power + lower"""
    lower: float
    width: int
    power: float
    single_precision: bool


@dataclass
class GaussianRange:
    """normal * width / power + lower"""
    lower: float
    width: int
    power: float
    single_precision: bool


@dataclass
class RandomString:
    """String of random length in [lower, lower + width) drawn from ALPHABET."""
    lower: int
    width: int


@dataclass
class NullableWrapper:
    """Yields None when the fraction draw is <= probability."""
    probability: float
    inner: "ValueGenerator"


ValueGenerator = Union[
    RandomRange,
    IncrementRange,
    DateBucket,
    ExplicitSetRandom,
    ExplicitSetRotate,
    UniformDecimal,
    GaussianRange,
    RandomString,
    NullableWrapper,
]


# =============================================================================
# 64-bit arithmetic
# =============================================================================

def wrap_long(value: int) -> int:
    """Reduce an integer to the signed 64-bit range."""
    return (value - LONG_MIN) % (2 ** 64) + LONG_MIN


def abs_long(value: int) -> int:
    """64-bit absolute value; the most negative value maps to itself."""
    if value == LONG_MIN:
        return value
    return abs(value)


def truncated_rem(dividend: int, divisor: int) -> int:
    """Remainder with the sign of the dividend."""
    remainder = abs(dividend) % abs(divisor)
    return -remainder if dividend < 0 else remainder


def saturate_long(value: float) -> int:
    """Truncate a float toward zero, clamped to the signed 64-bit range."""
    if value != value:
        return 0
    if value >= 2.0 ** 63:
        return LONG_MAX
    if value <= -(2.0 ** 63):
        return LONG_MIN
    return int(value)


def _fit(value: int, kind: FieldKind) -> int:
    value = wrap_long(value)
    if kind == FieldKind.INT and not INT_MIN <= value <= INT_MAX:
        raise GenerationError(f"Value {value} does not fit in an int field.")
    return value


# =============================================================================
# Dates
# =============================================================================

def parse_date_bound(value: int) -> Optional[date]:
    """Read an integer written as YYYYMMDD, None if it is not a valid date."""
    text = str(value)
    if len(text) < 8 or not text.isdigit():
        return None
    try:
        return date(int(text[:-4]), int(text[-4:-2]), int(text[-2:]))
    except ValueError:
        return None


def format_date(day: date) -> int:
    """Write a date as the integer YYYYMMDD."""
    return int(f"{day.year:04d}{day.month:02d}{day.day:02d}")


# =============================================================================
# Dispatch
# =============================================================================

def _random_range(gen: RandomRange, rng: RandomSource) -> int:
    value = wrap_long(truncated_rem(abs_long(rng.next_long()), gen.width) + gen.lower)
    return _fit(value * gen.scale, gen.kind)


def _increment_range(gen: IncrementRange, rng: RandomSource) -> int:
    value = gen.counter * gen.scale
    gen.counter = wrap_long(gen.counter + 1)
    return _fit(value, gen.kind)


def _date_bucket(gen: DateBucket, rng: RandomSource) -> int:
    if gen.bucket_count == 0:
        return gen.fallback
    offset = min(rng.next_int(gen.bucket_count) * gen.scale, gen.days_width - 1)
    return _fit(format_date(gen.lower_date + timedelta(days=offset)), gen.kind)


def _explicit_set_random(gen: ExplicitSetRandom, rng: RandomSource) -> Any:
    return gen.values[rng.next_int(len(gen.values))]


def _explicit_set_rotate(gen: ExplicitSetRotate, rng: RandomSource) -> Any:
    value = gen.values[gen.index]
    gen.index = (gen.index + 1) % len(gen.values)
    return value


def _to_field_float(value: float, single_precision: bool) -> float:
    if single_precision:
        return float(np.float32(value))
    return value


def _uniform_decimal(gen: UniformDecimal, rng: RandomSource) -> float:
    value = rng.next_double() * gen.width / gen.power + gen.lower
    return _to_field_float(value, gen.single_precision)


def _gaussian_range(gen: GaussianRange, rng: RandomSource) -> float:
    value = rng.next_gaussian() * gen.width / gen.power + gen.lower
    return _to_field_float(value, gen.single_precision)


def _random_string(gen: RandomString, rng: RandomSource) -> str:
    length = rng.next_int(gen.width) + gen.lower
    return "".join(ALPHABET[rng.next_int(len(ALPHABET))] for _ in range(length))


def _nullable(gen: NullableWrapper, rng: RandomSource) -> Any:
    if rng.next_double() <= gen.probability:
        return None
    return next_value(gen.inner, rng)


_HANDLERS: Dict[type, Callable[[Any, RandomSource], Any]] = {
    RandomRange: _random_range,
    IncrementRange: _increment_range,
    DateBucket: _date_bucket,
    ExplicitSetRandom: _explicit_set_random,
    ExplicitSetRotate: _explicit_set_rotate,
    UniformDecimal: _uniform_decimal,
    GaussianRange: _gaussian_range,
    RandomString: _random_string,
    NullableWrapper: _nullable,
}


def next_value(generator: ValueGenerator, rng: RandomSource) -> Any:
    """Produce the next value of `generator`, advancing its state if any."""
    return _HANDLERS[type(generator)](generator, rng)
