"""Terminal input/output and output-file persistence."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import structlog
from rich.console import Console
from rich.text import Text

logger = structlog.get_logger()


class EditorIO(Protocol):
    """Line-oriented I/O used by the editor session."""

    def prompt(self, message: str | Text) -> str:
        """Show a prompt and return one line of input.

        Raises EOFError when input is exhausted.
        """
        ...

    def emit(self, text: str | Text, style: str | None = None) -> None:
        """Write one line of output."""
        ...


class ConsoleIO:
    """EditorIO backed by a rich Console on stdin/stdout."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    def prompt(self, message: str | Text) -> str:
        if isinstance(message, str):
            message = Text(message)
        return self.console.input(message)

    def emit(self, text: str | Text, style: str | None = None) -> None:
        if isinstance(text, str):
            text = Text(text, style=style or "")
        elif style:
            text.stylize(style)
        self.console.print(text, soft_wrap=True)


def write_policy_file(path: str | Path, text: str) -> Path:
    """Write the serialized policy to *path* (UTF-8, no trailing newline)."""
    path = Path(path)
    path.write_text(text, encoding="utf-8")
    logger.info("policy_written", path=str(path), length=len(text))
    return path
