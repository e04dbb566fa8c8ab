"""
Record mocker: fill schema-described records with generated values.

Each field is configured with a short strategy command (e.g.
"incr from 1 scale 10", "rand in red,green", "date from 20160101 to 20170101")
and the resulting generators are applied once per output record.
"""

from .models import (
    FieldDescriptor,
    FieldKind,
    Strategy,
    StrategyToken,
)
from .errors import (
    MockerError,
    UnsupportedFieldError,
    SchemaError,
    InputExhaustedError,
    GenerationError,
    SettingsError,
)
from .console import Console
from .random_source import RandomSource
from .parser import StrategyParser
from .factory import GeneratorFactory
from .generators import ValueGenerator, next_value
from .union import UnionResolver
from .mocker import Mocker, MockerBuilder
from .configure import FieldConfigurator
from .schema_loader import SchemaLoader
from .writer import RecordWriter
from .config import MockerConfig

__all__ = [
    # Models
    "FieldDescriptor",
    "FieldKind",
    "Strategy",
    "StrategyToken",
    # Errors
    "MockerError",
    "UnsupportedFieldError",
    "SchemaError",
    "InputExhaustedError",
    "GenerationError",
    "SettingsError",
    # Configuration dialog
    "Console",
    "StrategyParser",
    "GeneratorFactory",
    "UnionResolver",
    "FieldConfigurator",
    # Generation
    "RandomSource",
    "ValueGenerator",
    "next_value",
    "Mocker",
    "MockerBuilder",
    # I/O
    "SchemaLoader",
    "RecordWriter",
    "MockerConfig",
]
