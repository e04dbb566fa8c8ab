"""
Shared fixtures for mocker tests.
"""

import io
from typing import Iterable, List, Optional

import pytest

from src.mocker.console import Console
from src.mocker.models import FieldDescriptor, FieldKind
from src.mocker.random_source import RandomSource


class SequenceRandom(RandomSource):
    """
    Scripted random source.

    Integer draws follow 0, 2, 1, 4, 3, 6, ... and bounded draws take that
    value modulo the bound. Fraction draws cycle through `fractions` if given.
    """

    def __init__(self, fractions: Optional[List[float]] = None):
        self.seed = None
        self._i = 0
        self._fractions = list(fractions or [])
        self._f = 0

    def _next(self) -> int:
        val = self._i
        self._i += 1
        if val == 0:
            return 0
        return val + (val % 2 * 2 - 1)

    def next_long(self) -> int:
        return self._next()

    def next_int(self, bound: int) -> int:
        return self._next() % bound

    def next_double(self) -> float:
        if self._fractions:
            value = self._fractions[self._f % len(self._fractions)]
            self._f += 1
            return value
        return float(self._next() // 5 - 3)

    def next_gaussian(self) -> float:
        return float(self._next() // 5 - 3)


class ScriptedConsole(Console):
    """Console over a fixed list of answers that records everything written."""

    def __init__(self, lines: Iterable[str]):
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        super().__init__(lines=lines, out=self.stdout, err=self.stderr)

    @property
    def prompts(self) -> str:
        return self.stdout.getvalue()

    @property
    def diagnostics(self) -> List[str]:
        return [line for line in self.stderr.getvalue().splitlines() if line]


NUMBERS = ("one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten")


@pytest.fixture
def seq_random() -> SequenceRandom:
    return SequenceRandom()


@pytest.fixture
def make_console():
    def _make(*lines: str) -> ScriptedConsole:
        return ScriptedConsole(list(lines))
    return _make


@pytest.fixture
def int_field() -> FieldDescriptor:
    return FieldDescriptor(name="testInt", kind=FieldKind.INT)


@pytest.fixture
def long_field() -> FieldDescriptor:
    return FieldDescriptor(name="testLong", kind=FieldKind.LONG)


@pytest.fixture
def enum_field() -> FieldDescriptor:
    return FieldDescriptor(name="testEnum", kind=FieldKind.ENUM, symbols=NUMBERS)


@pytest.fixture
def string_field() -> FieldDescriptor:
    return FieldDescriptor(name="testString", kind=FieldKind.STRING)


@pytest.fixture
def double_field() -> FieldDescriptor:
    return FieldDescriptor(name="testDouble", kind=FieldKind.DOUBLE)


@pytest.fixture
def float_field() -> FieldDescriptor:
    return FieldDescriptor(name="testFloat", kind=FieldKind.FLOAT)


@pytest.fixture
def make_random():
    return SequenceRandom
