"""
Mocker and MockerBuilder: apply one generator per field to a record.

The caller reuses a single record dict across calls. Fields without a
generator are never written, so they keep whatever value the previous record
left in them.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .generators import ValueGenerator, next_value
from .random_source import RandomSource

logger = logging.getLogger(__name__)


class Mocker:
    """Fills a record buffer in place, one generator per configured field."""

    def __init__(self, actions: List[Tuple[str, ValueGenerator]], rng: RandomSource):
        self._actions = tuple(actions)
        self.rng = rng

    @property
    def field_names(self) -> List[str]:
        return [name for name, _ in self._actions]

    def mock(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Write the next value of every generator into `record` and return it."""
        for name, generator in self._actions:
            record[name] = next_value(generator, self.rng)
        return record


class MockerBuilder:
    """Collects field generators in configuration order."""

    def __init__(self):
        self._random: Optional[RandomSource] = None
        self._actions: Dict[str, ValueGenerator] = {}

    def with_random(self, rng: RandomSource) -> "MockerBuilder":
        """Use `rng` instead of a source seeded from the clock."""
        if rng is None:
            raise ValueError("rng must not be None")
        self._random = rng
        return self

    def with_action(self, field_name: str, generator: ValueGenerator) -> "MockerBuilder":
        """Register the generator for a field; a repeated name keeps its position."""
        self._actions[field_name] = generator
        return self

    def build(self) -> Mocker:
        rng = self._random if self._random is not None else RandomSource()
        logger.debug("Built mocker for %d fields (seed %s)", len(self._actions), getattr(rng, "seed", None))
        return Mocker(list(self._actions.items()), rng)
