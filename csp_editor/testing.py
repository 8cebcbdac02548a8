"""Scripted I/O for driving an editor session without a terminal."""

from __future__ import annotations

from collections import deque
from typing import Iterable

from rich.text import Text


class ScriptedIO:
    """EditorIO that replays queued input lines and records everything shown.

    ``prompt`` raises EOFError once the script is exhausted, like ``input()``.
    ``styles`` holds the style each line of ``output`` was emitted with.
    """

    def __init__(self, lines: Iterable[str] = ()) -> None:
        self.pending = deque(lines)
        self.prompts: list[str] = []
        self.output: list[str] = []
        self.styles: list[str | None] = []

    def prompt(self, message: str | Text) -> str:
        self.prompts.append(str(message))
        if not self.pending:
            raise EOFError
        return self.pending.popleft()

    def emit(self, text: str | Text, style: str | None = None) -> None:
        self.output.append(str(text))
        self.styles.append(style)

    @property
    def transcript(self) -> str:
        return "\n".join(self.output)
