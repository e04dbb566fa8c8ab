"""
GeneratorFactory: build a value generator from a validated StrategyToken.
"""

import logging
import math
from typing import Any, List

from .errors import UnsupportedFieldError
from .generators import (
    DateBucket,
    ExplicitSetRandom,
    ExplicitSetRotate,
    GaussianRange,
    IncrementRange,
    RandomRange,
    RandomString,
    UniformDecimal,
    ValueGenerator,
    parse_date_bound,
    saturate_long,
    wrap_long,
)
from .models import FieldDescriptor, FieldKind, Strategy, StrategyToken

logger = logging.getLogger(__name__)

# Largest precision whose power of ten is a finite double
MAX_FINITE_PRECISION = 308


def _explicit_set(mode: Strategy, values: List[Any]) -> ValueGenerator:
    if mode == Strategy.INCR:
        return ExplicitSetRotate(values=list(values))
    return ExplicitSetRandom(values=list(values))


def decimal_power(precision: int) -> float:
    """10 ** precision as a double, infinite once it no longer fits."""
    if precision > MAX_FINITE_PRECISION:
        return math.inf
    return 10.0 ** precision


class GeneratorFactory:
    """Maps (strategy token, field descriptor) to a ValueGenerator."""

    def create(self, token: StrategyToken, descriptor: FieldDescriptor) -> ValueGenerator:
        """
        Build the generator for one field.

        Args:
            token: Validated strategy for the field
            descriptor: Schema description of the field

        Returns:
            A fresh generator with its own state

        Raises:
            UnsupportedFieldError: If the field kind cannot be generated
        """
        kind = descriptor.kind
        if kind.is_integer:
            generator = self._integer(token, kind)
        elif kind.is_decimal:
            generator = self._decimal(token, kind)
        elif kind == FieldKind.STRING:
            generator = self._string(token)
        elif kind == FieldKind.ENUM:
            generator = self._enum(token, descriptor)
        else:
            raise UnsupportedFieldError(
                f"The avro type '{kind.value}' is currently not supported."
            )

        logger.debug("Built %s for '%s'", type(generator).__name__, descriptor.name)
        return generator

    def _integer(self, token: StrategyToken, kind: FieldKind) -> ValueGenerator:
        if token.has_explicit_set:
            # 'date' over an explicit set picks at random
            return _explicit_set(token.mode, token.explicit_set)

        lower, upper, scale = token.lower_bound, token.upper_bound, token.scale

        if token.mode == Strategy.INCR:
            return IncrementRange(counter=lower, scale=scale, kind=kind)

        if token.mode == Strategy.DATE:
            lower_date = parse_date_bound(lower)
            upper_date = parse_date_bound(upper)
            days_width = (upper_date - lower_date).days
            return DateBucket(
                lower_date=lower_date,
                days_width=days_width,
                scale=scale,
                bucket_count=days_width // scale,
                fallback=lower if kind == FieldKind.INT else upper,
                kind=kind,
            )

        return RandomRange(lower=lower, width=wrap_long(upper - lower), scale=scale, kind=kind)

    def _decimal(self, token: StrategyToken, kind: FieldKind) -> ValueGenerator:
        power = decimal_power(token.precision)
        width = saturate_long((token.upper_bound - token.lower_bound) * power)
        single_precision = kind == FieldKind.FLOAT

        if token.mode == Strategy.GAUSS:
            return GaussianRange(
                lower=token.lower_bound,
                width=width,
                power=power,
                single_precision=single_precision,
            )
        return UniformDecimal(
            lower=token.lower_bound,
            width=width,
            power=power,
            single_precision=single_precision,
        )

    def _string(self, token: StrategyToken) -> ValueGenerator:
        if token.has_explicit_set:
            return _explicit_set(token.mode, token.explicit_set)

        # Without a set, 'incr' has nothing to rotate over and draws randomly
        return RandomString(lower=token.lower_bound, width=token.upper_bound - token.lower_bound)

    def _enum(self, token: StrategyToken, descriptor: FieldDescriptor) -> ValueGenerator:
        symbols = token.explicit_set if token.has_explicit_set else descriptor.symbols
        return _explicit_set(token.mode, list(symbols))
