"""
RecordWriter: write mocked records to an Avro, parquet or CSV file.

The mocker reuses one record dict, so every appended record is copied before
it is buffered. Each flush puts the buffered records on disk: Avro blocks are
appended to the container file, parquet row groups go through one open
ParquetWriter, and CSV rows are appended to the text file.

Column types come from the field kinds chosen while configuring, so an
integer column with nulls stays an integer column.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import fastavro
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
from fastavro.schema import SchemaParseException, UnknownType

from .errors import SchemaError
from .models import FieldKind

logger = logging.getLogger(__name__)

# Nullable pandas dtypes per generated kind
PANDAS_DTYPES: Dict[FieldKind, str] = {
    FieldKind.INT: "Int32",
    FieldKind.LONG: "Int64",
    FieldKind.FLOAT: "float32",
    FieldKind.DOUBLE: "float64",
    FieldKind.STRING: "string",
    FieldKind.ENUM: "string",
}

ARROW_TYPES: Dict[FieldKind, pa.DataType] = {
    FieldKind.INT: pa.int32(),
    FieldKind.LONG: pa.int64(),
    FieldKind.FLOAT: pa.float32(),
    FieldKind.DOUBLE: pa.float64(),
    FieldKind.STRING: pa.string(),
    FieldKind.ENUM: pa.string(),
}


def default_output_path(schema_path: Path, output_format: str) -> Path:
    """Output file next to the schema, e.g. users.avsc -> users.avro"""
    return Path(schema_path).with_suffix(f".{output_format}")


class RecordWriter:
    """
    Buffered writer for records that share one set of columns.

    Args:
        path: Output file
        field_names: Column order
        output_format: 'avro', 'parquet' or 'csv'
        flush_interval: Records buffered between flushes
        field_kinds: Generated kind per field; untyped columns are inferred
        schema: Record schema document, required for Avro output

    Raises:
        SchemaError: If Avro output is requested and the schema is not valid Avro
    """

    def __init__(
        self,
        path: Path,
        field_names: List[str],
        output_format: str = "avro",
        flush_interval: int = 1000,
        field_kinds: Optional[Dict[str, FieldKind]] = None,
        schema: Optional[Dict[str, Any]] = None,
    ):
        self.path = Path(path)
        self.field_names = list(field_names)
        self.output_format = output_format
        self.flush_interval = flush_interval
        self.field_kinds = dict(field_kinds or {})

        self._avro_schema = None
        if output_format == "avro":
            if schema is None:
                raise ValueError("Avro output needs the record schema")
            try:
                self._avro_schema = fastavro.parse_schema(schema)
            except (SchemaParseException, UnknownType) as e:
                raise SchemaError(f"Schema cannot be used for Avro output: {e}") from e

        self.records_written = 0
        self._pending: List[Dict[str, Any]] = []
        self._arrow_schema: Optional[pa.Schema] = None
        self._parquet_writer: Optional[pq.ParquetWriter] = None
        self._started = False
        self._closed = False

    def append(self, record: Dict[str, Any]) -> None:
        """Buffer a snapshot of `record`; flushes every `flush_interval` records."""
        self._pending.append({name: record.get(name) for name in self.field_names})
        if len(self._pending) >= self.flush_interval:
            self.flush()

    def flush(self) -> None:
        if not self._pending:
            return

        self._write(self._pending)
        self.records_written += len(self._pending)
        logger.debug("Flushed %d records to %s", len(self._pending), self.path)
        self._pending = []

    def close(self) -> None:
        if self._closed:
            return
        self.flush()

        # An empty run still leaves a file with the header or schema
        if not self._started:
            self._write([])
        if self._parquet_writer is not None:
            self._parquet_writer.close()

        self._closed = True
        logger.info("Wrote %d records to %s", self.records_written, self.path)

    def frame(self, rows: List[Dict[str, Any]]) -> pd.DataFrame:
        """Build a DataFrame with one explicitly typed column per field."""
        columns = {
            name: pd.Series(
                [row[name] for row in rows],
                dtype=PANDAS_DTYPES.get(self.field_kinds.get(name), "object"),
            )
            for name in self.field_names
        }
        return pd.DataFrame(columns, columns=self.field_names)

    def _write(self, rows: List[Dict[str, Any]]) -> None:
        if self.output_format == "avro":
            self._write_avro(rows)
        elif self.output_format == "parquet":
            self._write_parquet(self.frame(rows))
        else:
            self._write_csv(self.frame(rows))
        self._started = True

    def _write_avro(self, rows: List[Dict[str, Any]]) -> None:
        # 'a+b' makes fastavro append blocks after the existing header
        with open(self.path, "a+b" if self._started else "wb") as f:
            fastavro.writer(f, self._avro_schema, rows)

    def _write_parquet(self, df: pd.DataFrame) -> None:
        if self._arrow_schema is None:
            inferred = pa.Schema.from_pandas(df, preserve_index=False)
            self._arrow_schema = pa.schema([
                pa.field(name, ARROW_TYPES.get(self.field_kinds.get(name), inferred.field(name).type))
                for name in self.field_names
            ])
            self._parquet_writer = pq.ParquetWriter(self.path, self._arrow_schema)

        table = pa.Table.from_pandas(df, schema=self._arrow_schema, preserve_index=False)
        self._parquet_writer.write_table(table)

    def _write_csv(self, df: pd.DataFrame) -> None:
        df.to_csv(
            self.path,
            mode="a" if self._started else "w",
            header=not self._started,
            index=False,
        )

    def __enter__(self) -> "RecordWriter":
        return self

    def __exit__(self, exc_type: Optional[type], exc: Optional[BaseException], tb: Any) -> None:
        self.close()
