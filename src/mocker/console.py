"""
Console: the line source and output channels of the configuration dialog.

Prompts and help go to stdout, diagnostics to stderr. Any iterable of
strings can stand in for stdin, which is how settings files and tests
replay a dialog.
"""

import itertools
import logging
import sys
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO

from .errors import InputExhaustedError, SettingsError

logger = logging.getLogger(__name__)


def _stdin_lines() -> Iterator[str]:
    """Yield lines from stdin lazily, so replayed answers are used first."""
    while True:
        line = sys.stdin.readline()
        if not line:
            return
        yield line


class Console:
    """
    Reads answers one line at a time and writes prompts and diagnostics.

    Args:
        lines: Source of answer lines (stdin if None)
        out: Stream for prompts and help (stdout if None)
        err: Stream for diagnostics (stderr if None)
    """

    def __init__(
        self,
        lines: Optional[Iterable[str]] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        self._lines = iter(lines) if lines is not None else _stdin_lines()
        self._out = out
        self._err = err

    @classmethod
    def from_settings(cls, settings_path: Path) -> "Console":
        """
        Replay answers from a settings file, then continue on stdin.

        Raises:
            SettingsError: If the file cannot be read as UTF-8 text
        """
        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                recorded = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise SettingsError(f"Error reading specified settings file '{settings_path}': {e}") from e

        logger.info("Replaying %d answers from %s", len(recorded), settings_path)
        return cls(lines=itertools.chain(recorded, _stdin_lines()))

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def read_line(self, prompt: str) -> str:
        """Write `prompt` and return the next answer, stripped."""
        self.out.write(prompt)
        self.out.flush()
        try:
            line = next(self._lines)
        except StopIteration:
            raise InputExhaustedError(
                f"No more input while waiting for an answer to: {prompt.strip()}"
            ) from None
        return line.strip()

    def show(self, text: str) -> None:
        print(text, file=self.out)

    def error(self, text: str) -> None:
        print(text, file=self.err)
