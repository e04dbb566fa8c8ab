"""
Command-line entry point: configure every field of a schema interactively,
then write the requested number of mocked records.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Any, List, Optional

from tqdm import tqdm

from .config import OUTPUT_FORMATS, MockerConfig
from .configure import FieldConfigurator
from .console import Console
from .errors import MockerError
from .mocker import Mocker, MockerBuilder
from .random_source import RandomSource
from .schema_loader import SchemaLoader
from .writer import RecordWriter, default_output_path

logger = logging.getLogger(__name__)


def confirm_clear(console: Console) -> bool:
    """Ask whether an existing output file may be replaced."""
    while True:
        answer = console.read_line("Clear existing data? Y/N: ")
        if answer in ("Y", "y"):
            return True
        if answer in ("N", "n"):
            return False
        console.error("Please answer either 'Y' for yes or 'N' for no.")


def read_record_count(console: Console) -> int:
    """Prompt until a non-negative record count is entered."""
    while True:
        answer = console.read_line("How many records should be generated: ")
        if answer.isascii() and answer.isdigit():
            return int(answer)
        console.error("Please enter a whole number of records.")


def generate_records(
    mocker: Mocker,
    writer: RecordWriter,
    total: int,
    show_progress: bool = True,
) -> int:
    """
    Mock `total` records into `writer`, reusing one record buffer.

    Returns:
        Number of records appended
    """
    record: Dict[str, Any] = {name: None for name in writer.field_names}
    count = 0
    for _ in tqdm(range(total), desc="Generating records", unit="record", disable=not show_progress):
        writer.append(mocker.mock(record))
        count += 1
    return count


def run(
    schema_path: Path,
    console: Console,
    config: MockerConfig,
    output_path: Optional[Path] = None,
    total: Optional[int] = None,
) -> int:
    """
    Configure and generate one output file.

    Returns:
        Number of records generated (0 if the user kept an existing file)

    Raises:
        MockerError: On any fatal configuration or generation failure
    """
    output_format = config.output_format
    output_path = Path(output_path) if output_path else default_output_path(schema_path, output_format)

    clear_existing = False
    if output_path.exists():
        clear_existing = confirm_clear(console)
        if not clear_existing:
            console.show(f"Keeping existing data file '{output_path}'. Nothing generated.")
            return 0

    loader = SchemaLoader(schema_path)

    if total is None:
        total = read_record_count(console)

    builder = MockerBuilder().with_random(RandomSource(config.random_seed))
    configurator = FieldConfigurator(console)
    configurator.configure_fields(loader.fields, builder)
    mocker = builder.build()

    writer = RecordWriter(
        output_path,
        loader.list_fields(),
        output_format=output_format,
        flush_interval=config.flush_interval,
        field_kinds=configurator.resolved_kinds,
        schema=loader.schema,
    )

    if clear_existing:
        console.show("Deleting existing data file.")
        output_path.unlink()

    console.show(f"Creating {output_format} file '{output_path}'")
    console.show(f"Generating {total:,} records...")
    with writer:
        count = generate_records(mocker, writer, total, show_progress=config.show_progress)

    console.show(f"Done! {count:,} records generated.")
    return count


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate mock records for an Avro record schema."
    )
    parser.add_argument(
        "--schema", "-s",
        type=Path,
        required=True,
        help="Path to the record schema (.avsc, .json, .yaml)",
    )
    parser.add_argument(
        "--result", "-r",
        type=Path,
        default=None,
        help="Output file (default: schema path with the output format's extension)",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="File of recorded answers to replay before reading stdin",
    )
    parser.add_argument(
        "--count", "-n",
        type=int,
        default=None,
        help="Number of records to generate (prompted if omitted)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: clock)",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: avro)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = MockerConfig.from_env()
        if args.seed is not None:
            config.random_seed = args.seed
        if args.format is not None:
            config.output_format = args.format
        if args.no_progress:
            config.show_progress = False
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    if args.count is not None and args.count < 0:
        logger.error("--count must not be negative")
        return 1

    if args.settings is not None and not args.settings.exists():
        logger.error("Specified settings file '%s' does not exist.", args.settings)
        return 1

    try:
        console = Console.from_settings(args.settings) if args.settings is not None else Console()
        run(
            schema_path=args.schema,
            console=console,
            config=config,
            output_path=args.result,
            total=args.count,
        )
    except MockerError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
