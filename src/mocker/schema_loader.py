"""
SchemaLoader: Load an Avro record schema into FieldDescriptors.

Schemas are read from JSON (.avsc, .json) or YAML (.yaml, .yml). Only the
parts the mocker needs are interpreted: field names, primitive types, enum
symbols and union members. The parsed document is kept as `schema` for
Avro output.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import SchemaError
from .models import FieldDescriptor, FieldKind

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class SchemaLoader:
    """
    Loads a record schema and exposes its fields in declaration order.

    Named types (enums, fixed, nested records) are remembered so later
    fields can refer to them by name.
    """

    def __init__(self, schema_path: Optional[Path] = None):
        """
        Initialize the loader.

        Args:
            schema_path: Path to the .avsc/.json/.yaml schema file
        """
        self.record_name: str = ""
        self.schema: Dict[str, Any] = {}
        self.fields: List[FieldDescriptor] = []
        self._named_types: Dict[str, FieldDescriptor] = {}

        if schema_path:
            self.load_schema(schema_path)

    def load_schema(self, schema_path: Path) -> None:
        """Load a schema file; any read or parse failure is a SchemaError."""
        schema_path = Path(schema_path)
        try:
            with open(schema_path, "r", encoding="utf-8") as f:
                if schema_path.suffix.lower() in YAML_SUFFIXES:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise SchemaError(f"Error reading specified schema file '{schema_path}': {e}") from e

        self.load_dict(data)
        logger.info("Loaded schema '%s' with %d fields from %s",
                    self.record_name, len(self.fields), schema_path)

    def load_dict(self, data: Any) -> None:
        """Load an already-parsed schema document."""
        if not isinstance(data, dict) or data.get("type") != "record":
            raise SchemaError("Top-level schema must be a record.")

        fields = data.get("fields")
        if not isinstance(fields, list):
            raise SchemaError("Record schema must have a list of 'fields'.")

        self.schema = data
        self.record_name = data.get("name", "")
        self._named_types = {}
        self.fields = []
        seen = set()
        for field_data in fields:
            if not isinstance(field_data, dict) or not isinstance(field_data.get("name"), str):
                raise SchemaError(f"Every field needs a name, got: {field_data!r}")
            name = field_data["name"]
            if name in seen:
                raise SchemaError(f"Field '{name}' is declared twice.")
            seen.add(name)
            if "type" not in field_data:
                raise SchemaError(f"Field '{name}' has no type.")
            self.fields.append(self._parse_type(name, field_data["type"]))

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        """Get a field by name."""
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    def list_fields(self) -> List[str]:
        """List all field names in declaration order."""
        return [descriptor.name for descriptor in self.fields]

    def _parse_type(self, name: str, schema: Any) -> FieldDescriptor:
        if isinstance(schema, list):
            members = tuple(self._parse_type(name, member) for member in schema)
            return FieldDescriptor(
                name=name,
                kind=FieldKind.UNION,
                members=members,
                nullable=any(m.kind == FieldKind.NULL for m in members),
            )

        if isinstance(schema, dict):
            type_name = schema.get("type")
            if isinstance(type_name, (list, dict)):
                return self._parse_type(name, type_name)
            if type_name == "enum":
                return self._parse_enum(name, schema)

            descriptor = FieldDescriptor(name=name, kind=self._kind(name, type_name))
            if isinstance(schema.get("name"), str):
                self._named_types[schema["name"]] = descriptor
            return descriptor

        if isinstance(schema, str) and schema in self._named_types:
            named = self._named_types[schema]
            return FieldDescriptor(
                name=name,
                kind=named.kind,
                symbols=named.symbols,
                members=named.members,
                nullable=named.nullable,
            )

        return FieldDescriptor(name=name, kind=self._kind(name, schema))

    def _parse_enum(self, name: str, schema: Dict[str, Any]) -> FieldDescriptor:
        symbols = schema.get("symbols")
        if not isinstance(symbols, list) or not symbols or not all(isinstance(s, str) for s in symbols):
            raise SchemaError(f"Enum field '{name}' must declare a non-empty list of symbols.")

        descriptor = FieldDescriptor(
            name=name,
            kind=FieldKind.ENUM,
            symbols=tuple(dict.fromkeys(symbols)),
        )
        if isinstance(schema.get("name"), str):
            self._named_types[schema["name"]] = descriptor
        return descriptor

    @staticmethod
    def _kind(name: str, type_name: Any) -> FieldKind:
        try:
            return FieldKind(type_name)
        except ValueError:
            raise SchemaError(f"Field '{name}' has unknown type {type_name!r}.") from None
