"""
StrategyParser: turn one line of user text into a StrategyToken.

The parser keeps reading lines until one matches the grammar for the field
kind and passes validation. Every rejected line produces a diagnostic on the
console and has no other effect.
"""

import logging
import math
from typing import Dict, List, Optional

from .console import Console
from .errors import UnsupportedFieldError
from .generators import parse_date_bound
from .grammar import PATTERNS, split_list, usage
from .models import (
    DEFAULT_PRECISION,
    DEFAULT_SCALE,
    DEFAULT_STRING_UPPER,
    DOUBLE_MAX,
    FLOAT_MAX,
    INT_MAX,
    INT_MIN,
    LONG_MAX,
    LONG_MIN,
    FieldDescriptor,
    FieldKind,
    Strategy,
    StrategyToken,
)

logger = logging.getLogger(__name__)

HELP_HINT = "Enter 'help' for more info."
PARSE_FAILED = f"Could not parse input. {HELP_HINT}"


def _param_error(param: str) -> str:
    return f"Could not parse parameter '{param}'. {HELP_HINT}"


def _parse_int(text: str, lowest: int, highest: int) -> Optional[int]:
    """Parse a regex-checked integer literal, None if it does not fit."""
    value = int(text)
    if lowest <= value <= highest:
        return value
    return None


def _parse_decimal(text: str) -> Optional[float]:
    """Parse a regex-checked decimal literal, None if it is not finite."""
    value = float(text)
    if math.isfinite(value):
        return value
    return None


class StrategyParser:
    """
    Reads strategy commands for int, long, float, double, string and enum
    fields. Union fields are handled by the UnionResolver.
    """

    def parse(
        self,
        console: Console,
        field_name: str,
        descriptor: FieldDescriptor,
    ) -> StrategyToken:
        """
        Prompt until a valid strategy is entered for the field.

        Args:
            console: Line source and diagnostic channel
            field_name: Name shown in the prompt
            descriptor: Schema description of the field

        Returns:
            The validated strategy token

        Raises:
            UnsupportedFieldError: If the field kind has no grammar
            InputExhaustedError: If the console runs out of lines
        """
        kind = descriptor.kind
        if kind not in PATTERNS:
            raise UnsupportedFieldError(
                f"The avro type '{kind.value}' is currently not supported."
            )
        pattern = PATTERNS[kind]

        while True:
            line = console.read_line(f"Strategy for {kind.value} '{field_name}':")
            if line == "help":
                console.show(usage(kind, field_name))
                continue

            match = pattern.match(line)
            if match is None:
                console.error(PARSE_FAILED)
                continue

            groups = match.groupdict()
            if kind.is_integer:
                token = self._integer_token(console, groups, kind)
            elif kind.is_decimal:
                token = self._decimal_token(console, groups, kind)
            elif kind == FieldKind.STRING:
                token = self._string_token(console, groups)
            else:
                token = self._enum_token(console, groups, descriptor)

            if token is not None:
                logger.debug("Strategy for %s '%s': %s", kind.value, field_name, token)
                return token

    def _integer_token(self, console: Console, groups: Dict[str, Optional[str]], kind: FieldKind) -> Optional[StrategyToken]:
        mode = Strategy(groups["strategy"] or "rand")

        if groups["symbols"]:
            lowest, highest = (INT_MIN, INT_MAX) if kind == FieldKind.INT else (LONG_MIN, LONG_MAX)
            values: List[int] = []
            for item in split_list(groups["symbols"]):
                value = _parse_int(item, lowest, highest)
                if value is None:
                    console.error(_param_error("in"))
                    return None
                values.append(value)
            return StrategyToken(mode=mode, explicit_set=values)

        lower = 0
        if groups["lower"]:
            lower = _parse_int(groups["lower"], LONG_MIN, LONG_MAX)
            if lower is None:
                console.error(_param_error("from"))
                return None

        upper = INT_MAX if kind == FieldKind.INT else LONG_MAX
        if groups["upper"]:
            upper = _parse_int(groups["upper"], LONG_MIN, LONG_MAX)
            if upper is None:
                console.error(_param_error("to"))
                return None

        scale = DEFAULT_SCALE
        if groups["scale"]:
            scale = _parse_int(groups["scale"], INT_MIN, INT_MAX)
            if scale is None:
                console.error(_param_error("scale"))
                return None

        if upper <= lower:
            console.error(f"Invalid input! Illegal range from '{lower}' to '{upper}'. {HELP_HINT}")
            return None

        if scale == 0:
            console.error(f"Invalid input! Scale can't be zero. {HELP_HINT}")
            return None

        if mode == Strategy.DATE:
            if not groups["lower"] or not groups["upper"]:
                console.error(f"Strategy 'date' requires both 'from' and 'to' as YYYYMMDD. {HELP_HINT}")
                return None
            lower_date = parse_date_bound(lower)
            upper_date = parse_date_bound(upper)
            if lower_date is None or upper_date is None:
                console.error(f"Could not parse date span. Dates are entered as YYYYMMDD. {HELP_HINT}")
                return None
            if (upper_date - lower_date).days <= 0:
                console.error("Date span must be at least 1 day.")
                return None

        return StrategyToken(mode=mode, lower_bound=lower, upper_bound=upper, scale=scale)

    def _decimal_token(self, console: Console, groups: Dict[str, Optional[str]], kind: FieldKind) -> Optional[StrategyToken]:
        mode = Strategy(groups["strategy"] or "rand")

        lower = 0.0
        if groups["lower"]:
            lower = _parse_decimal(groups["lower"])
            if lower is None:
                console.error(_param_error("from"))
                return None

        upper = FLOAT_MAX if kind == FieldKind.FLOAT else DOUBLE_MAX
        if groups["upper"]:
            upper = _parse_decimal(groups["upper"])
            if upper is None:
                console.error(_param_error("to"))
                return None

        precision = DEFAULT_PRECISION
        if groups["precision"]:
            precision = _parse_int(groups["precision"], 0, INT_MAX)
            if precision is None:
                console.error(_param_error("prec"))
                return None

        if upper <= lower:
            console.error(f"Invalid input! Illegal range from '{lower:f}' to '{upper:f}'. {HELP_HINT}")
            return None

        return StrategyToken(mode=mode, lower_bound=lower, upper_bound=upper, precision=precision)

    def _string_token(self, console: Console, groups: Dict[str, Optional[str]]) -> Optional[StrategyToken]:
        mode = Strategy(groups["strategy"] or "rand")

        if groups["symbols"]:
            return StrategyToken(mode=mode, explicit_set=split_list(groups["symbols"]))

        lower = 0
        if groups["lower"]:
            lower = _parse_int(groups["lower"], 0, INT_MAX)
            if lower is None:
                console.error(_param_error("from"))
                return None

        upper = DEFAULT_STRING_UPPER
        if groups["upper"]:
            upper = _parse_int(groups["upper"], 0, INT_MAX)
            if upper is None:
                console.error(_param_error("to"))
                return None

        if upper <= lower:
            console.error(f"Invalid input! Illegal range from '{lower}' to '{upper}'. {HELP_HINT}")
            return None

        return StrategyToken(mode=mode, lower_bound=lower, upper_bound=upper)

    def _enum_token(self, console: Console, groups: Dict[str, Optional[str]], descriptor: FieldDescriptor) -> Optional[StrategyToken]:
        mode = Strategy(groups["strategy"] or "rand")

        if not groups["symbols"]:
            return StrategyToken(mode=mode)

        subset = split_list(groups["symbols"])
        unknown = [s for s in dict.fromkeys(subset) if s not in descriptor.symbols]
        if unknown:
            listed = ", ".join(f"'{s}'" for s in unknown)
            console.error(f"Parameter 'in' contains invalid symbols ({listed}). {HELP_HINT}")
            return None

        return StrategyToken(mode=mode, explicit_set=subset)
