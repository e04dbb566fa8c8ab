"""
FieldConfigurator: run the configuration dialog for every field of a schema.
"""

import logging
from typing import Dict, Iterable

from .console import Console
from .errors import UnsupportedFieldError
from .factory import GeneratorFactory
from .generators import ValueGenerator
from .grammar import PATTERNS
from .mocker import MockerBuilder
from .models import FieldDescriptor, FieldKind
from .parser import StrategyParser
from .union import UnionResolver

logger = logging.getLogger(__name__)


class FieldConfigurator:
    """
    Routes each field to the strategy dialog for its kind.

    Union fields go through the UnionResolver, which comes back here for the
    member type it selects.
    """

    def __init__(self, console: Console):
        self.console = console
        self.parser = StrategyParser()
        self.factory = GeneratorFactory()
        self.union_resolver = UnionResolver()
        # Kind actually generated per field, with unions resolved to their member
        self.resolved_kinds: Dict[str, FieldKind] = {}

    def configure(self, field_name: str, descriptor: FieldDescriptor) -> ValueGenerator:
        """
        Build the generator for one field.

        Raises:
            UnsupportedFieldError: If the field kind cannot be generated
        """
        kind = descriptor.kind
        if kind == FieldKind.UNION:
            return self.union_resolver.resolve(self.console, field_name, descriptor, self.configure)

        if kind not in PATTERNS:
            raise UnsupportedFieldError(
                f"The avro type '{kind.value}' is currently not supported."
            )

        token = self.parser.parse(self.console, field_name, descriptor)
        generator = self.factory.create(token, descriptor)
        self.resolved_kinds[field_name] = kind
        return generator

    def configure_fields(
        self,
        fields: Iterable[FieldDescriptor],
        builder: MockerBuilder,
    ) -> MockerBuilder:
        """Configure every field in order and register it with the builder."""
        for descriptor in fields:
            builder.with_action(descriptor.name, self.configure(descriptor.name, descriptor))
            logger.info("Configured %s field '%s'", descriptor.type_name, descriptor.name)
        return builder
