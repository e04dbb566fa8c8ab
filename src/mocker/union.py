"""
UnionResolver: configure a union field as one concrete member type.

A nullable union first asks for the probability of null. When more than one
non-null member exists, exactly one is selected for the whole run; its own
strategy dialog then builds the inner generator.
"""

import logging
from typing import Callable, List, Optional

from .console import Console
from .errors import UnsupportedFieldError
from .generators import NullableWrapper, ValueGenerator
from .models import FieldDescriptor

logger = logging.getLogger(__name__)

ConfigureFn = Callable[[str, FieldDescriptor], ValueGenerator]


class UnionResolver:
    """Interactive resolution of union fields."""

    def resolve(
        self,
        console: Console,
        field_name: str,
        descriptor: FieldDescriptor,
        configure: ConfigureFn,
    ) -> ValueGenerator:
        """
        Build the generator for a union field.

        Args:
            console: Line source and diagnostic channel
            field_name: Name shown in the prompts
            descriptor: The union descriptor
            configure: Builds the generator for the selected member

        Returns:
            The member's generator, wrapped when null has a positive probability

        Raises:
            UnsupportedFieldError: If the union has no non-null member
        """
        null_probability = 0.0
        if descriptor.nullable:
            null_probability = self.read_null_probability(console, field_name, descriptor)

        members = list(dict.fromkeys(descriptor.non_null_members))
        if not members:
            raise UnsupportedFieldError(
                f"Avro {descriptor.type_name} field '{field_name}' does not have at least 1 non-null type."
            )

        if len(members) == 1:
            selected = members[0]
        else:
            selected = self.select_member(console, field_name, descriptor, members)

        logger.debug("Union '%s' generates %s (null probability %s)",
                     field_name, selected.type_name, null_probability)

        inner = configure(field_name, selected)
        if descriptor.nullable and null_probability > 0:
            return NullableWrapper(probability=null_probability, inner=inner)
        return inner

    def read_null_probability(self, console: Console, field_name: str, descriptor: FieldDescriptor) -> float:
        """Prompt until a probability in [0, 1] is entered."""
        while True:
            line = console.read_line(
                f"Enter probability (0.0 - 1.0) that {descriptor.type_name} '{field_name}' is null: "
            )
            probability = self._parse_probability(line)
            if probability is None:
                console.error("Could not parse probability. Enter a real number between 0.0 and 1.0.")
                continue
            if not 0.0 <= probability <= 1.0:
                console.error("Probability must be in span 0.0 and 1.0 (inclusive).")
                continue
            return probability

    def select_member(
        self,
        console: Console,
        field_name: str,
        descriptor: FieldDescriptor,
        members: List[FieldDescriptor],
    ) -> FieldDescriptor:
        """Prompt until the name of one member type is entered."""
        names = ", ".join(m.type_name for m in members)
        while True:
            line = console.read_line(f"Select type to generate for {descriptor.type_name} '{field_name}': ")
            if line == "help":
                console.show(f"Enter one of the following: [{names}].")
                continue

            for member in members:
                if member.type_name.lower() == line.lower():
                    return member

            console.error(f"Unknown type '{line}'. Enter one of the following: [{names}].")

    @staticmethod
    def _parse_probability(text: str) -> Optional[float]:
        try:
            return float(text)
        except ValueError:
            return None
