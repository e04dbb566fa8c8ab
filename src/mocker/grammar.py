"""
Strategy grammar: one regular expression and one usage block per field kind.

Every clause is optional and introduced by its keyword; clauses must appear
in the order they are listed in the usage line.
"""

import re
from typing import Dict, List

from .models import FieldKind

COMMA = re.compile(r",\s*")

INTEGER_PATTERN = re.compile(
    r"^(?P<strategy>rand|incr|date)?"
    r"(?:\s*from\s*(?P<lower>-?\d+))?"
    r"(?:\s*to\s*(?P<upper>-?\d+))?"
    r"(?:\s*scale\s*(?P<scale>\d+))?"
    r"(?:\s*in\s*(?P<symbols>-?\d+(?:,\s*-?\d+)*))?$"
)

DECIMAL_PATTERN = re.compile(
    r"^(?P<strategy>rand|gauss)?"
    r"(?:\s*from\s*(?P<lower>-?\d+(?:\.\d*)?))?"
    r"(?:\s*to\s*(?P<upper>-?\d+(?:\.\d*)?))?"
    r"(?:\s*prec\s*(?P<precision>\d+))?$"
)

STRING_PATTERN = re.compile(
    r"^(?P<strategy>rand|incr)?"
    r"(?:\s*from\s*(?P<lower>\d+))?"
    r"(?:\s*to\s*(?P<upper>\d+))?"
    r"(?:\s*in\s*(?P<symbols>[^,]+(?:,\s*[^,]+)*))?$"
)

ENUM_PATTERN = re.compile(
    r"^(?P<strategy>rand|incr)?"
    r"(?:\s*in\s*(?P<symbols>[^,]+(?:,\s*[^,]+)*))?$"
)

PATTERNS: Dict[FieldKind, "re.Pattern[str]"] = {
    FieldKind.INT: INTEGER_PATTERN,
    FieldKind.LONG: INTEGER_PATTERN,
    FieldKind.FLOAT: DECIMAL_PATTERN,
    FieldKind.DOUBLE: DECIMAL_PATTERN,
    FieldKind.STRING: STRING_PATTERN,
    FieldKind.ENUM: ENUM_PATTERN,
}

_INTEGER_HELP = """\
Enter a strategy to use when generating integers for {kind} '{name}'.
  Options:
    rand     : integers are randomly distributed.
    incr     : increments by one for each record.
    date     : random day in span, bounds given as YYYYMMDD.
    from     : the lower bound (inclusive) in span.
    to       : the upper bound (exclusive) in span.
    scale    : factor to multiply each value in span with.
    in       : set of integers to select from.
  Example: [incr|rand|date] (from <integer>) (to <integer>) (scale <integer>) (in <integer, integer...>)"""

_DECIMAL_HELP = """\
Enter a strategy to use when generating decimal numbers for {kind} '{name}'.
  Options:
    rand     : decimals are randomly distributed.
    gauss    : decimals use gaussian distribution.
    from     : the lower bound (inclusive) in span.
    to       : the upper bound (exclusive) in span.
    prec     : the decimal precision.
  Example: [rand|gauss] (from <decimal>) (to <decimal>) (prec <integer>)"""

_STRING_HELP = """\
Enter a strategy to use when generating strings for {kind} '{name}'.
  Options:
    rand     : strings are randomly distributed.
    incr     : selects string by rotating over the set.
    from     : minimum (inclusive) length of string.
    to       : maximum (exclusive) length of string.
    in       : set of strings to select from.
  Example: [incr|rand] (from <integer>) (to <integer>) (in <string, string...>)"""

_ENUM_HELP = """\
Enter a strategy to use when generating symbols for {kind} '{name}'.
  Options:
    rand     : symbols are randomly distributed.
    incr     : rotates over the symbols for each record.
    in       : subset of symbols to select from.
  Example: [incr|rand] (in <symbol, symbol...>)"""

_HELP: Dict[FieldKind, str] = {
    FieldKind.INT: _INTEGER_HELP,
    FieldKind.LONG: _INTEGER_HELP,
    FieldKind.FLOAT: _DECIMAL_HELP,
    FieldKind.DOUBLE: _DECIMAL_HELP,
    FieldKind.STRING: _STRING_HELP,
    FieldKind.ENUM: _ENUM_HELP,
}


def usage(kind: FieldKind, name: str) -> str:
    """Usage block shown when the user types 'help'."""
    return _HELP[kind].format(kind=kind.value, name=name)


def split_list(text: str) -> List[str]:
    """Split an 'in' clause on commas followed by optional whitespace."""
    return COMMA.split(text)
