"""
End-to-end tests for the command-line run, the writer and run configuration.
"""

import json

import fastavro
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from src.mocker.cli import main, read_record_count, run
from src.mocker.config import MockerConfig
from src.mocker.console import Console
from src.mocker.errors import InputExhaustedError, SchemaError, SettingsError, UnsupportedFieldError
from src.mocker.models import FieldKind
from src.mocker.writer import RecordWriter, default_output_path


SCHEMA = {
    "type": "record",
    "name": "User",
    "fields": [
        {"name": "id", "type": "long"},
        {"name": "colour", "type": {"type": "enum", "name": "Colour", "symbols": ["RED", "GREEN"]}},
        {"name": "nickname", "type": ["null", "string"]},
    ],
}

ANSWERS = ["incr from 1", "incr", "0", "incr in a,b"]

# First integer a float64 can no longer represent exactly
BIG = 2 ** 53 + 1


def _read_avro(path):
    with open(path, "rb") as f:
        return list(fastavro.reader(f))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MOCKER_FLUSH_INTERVAL", "MOCKER_OUTPUT_FORMAT", "MOCKER_SEED"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def schema_path(tmp_path):
    path = tmp_path / "user.avsc"
    path.write_text(json.dumps(SCHEMA))
    return path


@pytest.fixture
def csv_config():
    return MockerConfig(output_format="csv", random_seed=7, show_progress=False, flush_interval=2)


class TestRun:
    def test_writes_avro_by_default(self, schema_path, make_console):
        config = MockerConfig(random_seed=7, show_progress=False, flush_interval=2)
        assert run(schema_path, make_console("5", *ANSWERS), config) == 5

        records = _read_avro(schema_path.with_suffix(".avro"))
        assert [r["id"] for r in records] == [1, 2, 3, 4, 5]
        assert [r["colour"] for r in records] == ["RED", "GREEN", "RED", "GREEN", "RED"]
        assert [r["nickname"] for r in records] == ["a", "b", "a", "b", "a"]

    def test_writes_csv(self, schema_path, csv_config, make_console):
        console = make_console("5", *ANSWERS)
        count = run(schema_path, console, csv_config)

        output = schema_path.with_suffix(".csv")
        df = pd.read_csv(output)
        assert count == 5
        assert list(df.columns) == ["id", "colour", "nickname"]
        assert df["id"].tolist() == [1, 2, 3, 4, 5]
        assert df["colour"].tolist() == ["RED", "GREEN", "RED", "GREEN", "RED"]
        assert df["nickname"].tolist() == ["a", "b", "a", "b", "a"]
        assert "How many records should be generated: " in console.prompts
        assert "Done! 5 records generated." in console.prompts

    def test_writes_parquet(self, schema_path, make_console, tmp_path):
        config = MockerConfig(output_format="parquet", show_progress=False)
        output = tmp_path / "out.parquet"
        run(schema_path, make_console(*ANSWERS), config, output_path=output, total=3)

        df = pd.read_parquet(output)
        assert df["id"].tolist() == [1, 2, 3]

    def test_zero_records_writes_header(self, schema_path, csv_config, make_console):
        assert run(schema_path, make_console("0", *ANSWERS), csv_config) == 0
        assert schema_path.with_suffix(".csv").read_text().strip() == "id,colour,nickname"

    def test_keeps_existing_file(self, schema_path, csv_config, make_console):
        output = schema_path.with_suffix(".csv")
        output.write_text("keep me\n")
        console = make_console("maybe", "N")

        assert run(schema_path, console, csv_config) == 0
        assert output.read_text() == "keep me\n"
        assert console.diagnostics == ["Please answer either 'Y' for yes or 'N' for no."]

    def test_replaces_existing_file(self, schema_path, csv_config, make_console):
        output = schema_path.with_suffix(".csv")
        output.write_text("old data\n")
        console = make_console("y", "2", *ANSWERS)

        assert run(schema_path, console, csv_config) == 2
        assert pd.read_csv(output)["id"].tolist() == [1, 2]
        assert "Deleting existing data file." in console.prompts

    def test_existing_file_survives_failed_configuration(self, schema_path, csv_config, make_console):
        output = schema_path.with_suffix(".csv")
        output.write_text("old data\n")

        with pytest.raises(InputExhaustedError):
            run(schema_path, make_console("Y", "2", "incr"), csv_config)
        assert output.read_text() == "old data\n"

    def test_unsupported_field(self, tmp_path, csv_config, make_console):
        path = tmp_path / "flags.avsc"
        path.write_text(json.dumps({"type": "record", "fields": [{"name": "on", "type": "boolean"}]}))
        with pytest.raises(UnsupportedFieldError):
            run(path, make_console("1"), csv_config)


def test_record_count_is_retried(make_console):
    console = make_console("-1", "ten", "\u00b2", "10")
    assert read_record_count(console) == 10
    assert len(console.diagnostics) == 3


def test_settings_file_must_be_utf8(tmp_path):
    settings = tmp_path / "settings.txt"
    settings.write_bytes(b"\xff\xfe\xfa incr\n")
    with pytest.raises(SettingsError, match="Error reading specified settings file"):
        Console.from_settings(settings)


class TestMain:
    def test_replays_settings(self, schema_path, tmp_path):
        settings = tmp_path / "settings.txt"
        settings.write_text("\n".join(ANSWERS) + "\n")
        output = tmp_path / "result.csv"

        code = main([
            "--schema", str(schema_path),
            "--result", str(output),
            "--settings", str(settings),
            "--count", "4",
            "--format", "csv",
            "--seed", "3",
            "--no-progress",
        ])

        assert code == 0
        assert pd.read_csv(output)["colour"].tolist() == ["RED", "GREEN", "RED", "GREEN"]

    def test_missing_settings_file(self, schema_path, tmp_path):
        assert main(["--schema", str(schema_path), "--settings", str(tmp_path / "none.txt")]) == 1

    def test_missing_schema(self, tmp_path):
        settings = tmp_path / "settings.txt"
        settings.write_text("1\n")
        code = main([
            "--schema", str(tmp_path / "none.avsc"),
            "--settings", str(settings),
            "--format", "csv",
            "--no-progress",
        ])
        assert code == 1

    def test_negative_count(self, schema_path):
        assert main(["--schema", str(schema_path), "--count", "-1"]) == 1

    def test_invalid_env_config(self, schema_path, monkeypatch):
        monkeypatch.setenv("MOCKER_FLUSH_INTERVAL", "0")
        assert main(["--schema", str(schema_path)]) == 1

    def test_undecodable_settings_file(self, schema_path, tmp_path):
        settings = tmp_path / "settings.txt"
        settings.write_bytes(b"\xff\xfe\xfa incr\n")
        assert main(["--schema", str(schema_path), "--settings", str(settings), "--format", "csv"]) == 1


class TestRecordWriter:
    def test_snapshots_reused_record(self, tmp_path):
        path = tmp_path / "out.csv"
        record = {"a": 0, "b": "x"}
        with RecordWriter(path, ["a", "b"], output_format="csv", flush_interval=2) as writer:
            for i in range(5):
                record["a"] = i
                writer.append(record)

        assert writer.records_written == 5
        df = pd.read_csv(path)
        assert df["a"].tolist() == [0, 1, 2, 3, 4]
        assert df["b"].tolist() == ["x"] * 5

    def test_missing_values_become_empty(self, tmp_path):
        path = tmp_path / "out.csv"
        with RecordWriter(path, ["a", "b"], output_format="csv") as writer:
            writer.append({"a": 1})
        assert pd.read_csv(path)["b"].isna().all()

    def test_frame_uses_nullable_dtypes(self, tmp_path):
        kinds = {"i": FieldKind.INT, "l": FieldKind.LONG, "f": FieldKind.FLOAT, "e": FieldKind.ENUM}
        writer = RecordWriter(tmp_path / "out.csv", list(kinds), output_format="csv", field_kinds=kinds)
        df = writer.frame([
            {"i": 1, "l": BIG, "f": 0.5, "e": "RED"},
            {"i": None, "l": None, "f": None, "e": None},
        ])

        assert [str(t) for t in df.dtypes] == ["Int32", "Int64", "float32", "string"]
        assert df["l"][0] == BIG
        assert df["i"].isna().tolist() == [False, True]

    def test_parquet_flushes_row_groups(self, tmp_path):
        path = tmp_path / "out.parquet"
        writer = RecordWriter(
            path, ["a"], output_format="parquet", flush_interval=2, field_kinds={"a": FieldKind.LONG}
        )
        for i in range(3):
            writer.append({"a": i})
        assert path.exists()
        assert writer.records_written == 2

        writer.close()
        writer.close()
        parquet = pq.ParquetFile(path)
        assert parquet.num_row_groups == 2
        assert parquet.read().column("a").to_pylist() == [0, 1, 2]

    def test_empty_parquet_keeps_schema(self, tmp_path):
        path = tmp_path / "out.parquet"
        RecordWriter(path, ["a"], output_format="parquet", field_kinds={"a": FieldKind.INT}).close()

        table = pq.read_table(path)
        assert table.num_rows == 0
        assert table.schema.field("a").type == pa.int32()

    def test_avro_appends_blocks(self, tmp_path):
        path = tmp_path / "out.avro"
        schema = {"type": "record", "name": "R", "fields": [{"name": "a", "type": "long"}]}
        with RecordWriter(path, ["a"], output_format="avro", flush_interval=2, schema=schema) as writer:
            for i in range(5):
                writer.append({"a": i})

        assert [r["a"] for r in _read_avro(path)] == [0, 1, 2, 3, 4]

    def test_empty_avro_has_header(self, tmp_path):
        path = tmp_path / "out.avro"
        schema = {"type": "record", "name": "R", "fields": [{"name": "a", "type": "int"}]}
        RecordWriter(path, ["a"], schema=schema).close()

        with open(path, "rb") as f:
            reader = fastavro.reader(f)
            assert reader.writer_schema["name"] == "R"
            assert list(reader) == []

    def test_avro_needs_schema(self, tmp_path):
        with pytest.raises(ValueError):
            RecordWriter(tmp_path / "out.avro", ["a"])

    def test_invalid_avro_schema(self, tmp_path):
        schema = {"type": "record", "name": "R", "fields": [{"name": "a", "type": "Missing"}]}
        with pytest.raises(SchemaError):
            RecordWriter(tmp_path / "out.avro", ["a"], schema=schema)

    def test_default_output_path(self, tmp_path):
        assert default_output_path(tmp_path / "user.avsc", "avro") == tmp_path / "user.avro"


class TestNullableLong:
    """Nullable integers above 2**53 must survive every output format exactly."""

    SCHEMA = {
        "type": "record",
        "name": "Counters",
        "fields": [
            {"name": "id", "type": ["null", "long"]},
            {"name": "small", "type": ["null", "int"]},
        ],
    }
    ANSWERS = ["0.5", f"incr from {BIG}", "0.5", "incr"]

    @pytest.fixture
    def counters_path(self, tmp_path):
        path = tmp_path / "counters.avsc"
        path.write_text(json.dumps(self.SCHEMA))
        return path

    def _generate(self, counters_path, make_console, output_format):
        config = MockerConfig(output_format=output_format, random_seed=7, show_progress=False, flush_interval=6)
        assert run(counters_path, make_console("20", *self.ANSWERS), config) == 20
        return counters_path.with_suffix(f".{output_format}")

    @staticmethod
    def _check(ids, small):
        present = [v for v in ids if v is not None]
        assert len(ids) == 20
        assert 0 < len(present) < 20
        assert present == list(range(BIG, BIG + len(present)))
        assert [v for v in small if v is not None] == list(range(len([v for v in small if v is not None])))

    def test_csv(self, counters_path, make_console):
        output = self._generate(counters_path, make_console, "csv")
        rows = [line.split(",") for line in output.read_text().splitlines()[1:]]
        assert all("." not in value for row in rows for value in row)

        self._check(
            [int(row[0]) if row[0] else None for row in rows],
            [int(row[1]) if row[1] else None for row in rows],
        )

    def test_parquet(self, counters_path, make_console):
        table = pq.read_table(self._generate(counters_path, make_console, "parquet"))
        assert table.schema.field("id").type == pa.int64()
        assert table.schema.field("small").type == pa.int32()
        self._check(table.column("id").to_pylist(), table.column("small").to_pylist())

    def test_avro(self, counters_path, make_console):
        records = _read_avro(self._generate(counters_path, make_console, "avro"))
        self._check([r["id"] for r in records], [r["small"] for r in records])


class TestMockerConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MOCKER_FLUSH_INTERVAL", "50")
        monkeypatch.setenv("MOCKER_OUTPUT_FORMAT", "csv")
        monkeypatch.setenv("MOCKER_SEED", "9")

        config = MockerConfig.from_env()
        assert (config.flush_interval, config.output_format, config.random_seed) == (50, "csv", 9)

    def test_defaults(self):
        config = MockerConfig.from_env()
        assert config.flush_interval == 1000
        assert config.output_format == "avro"
        assert config.random_seed is None

    @pytest.mark.parametrize("kwargs", [{"flush_interval": 0}, {"output_format": "orc"}])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            MockerConfig(**kwargs)
