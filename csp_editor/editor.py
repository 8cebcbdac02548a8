"""Interactive directive editor.

The session is a small state machine. Each state handler reads at most one
line of input, applies it to the directive set and returns the next state:

    MENU -> EDIT_VALUE -> MENU
    MENU -> ADD_NAME -> (ADD_NAME ...) -> MENU
    MENU -> TERMINATED  (P prints and saves the policy, Q quits)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from functools import partial
from typing import Callable

import structlog
from rich.text import Text

from csp_editor.console import EditorIO, write_policy_file
from csp_editor.policy import Directives, build_csp, split_tokens

logger = structlog.get_logger()

MENU_PROMPT = "Select a directive number to edit, A to add, P to print, or Q to quit: "
ADD_PROMPT = "Enter the new directive name and values (e.g., 'script-src https://example.com'): "


class EditorState(str, enum.Enum):
    MENU = "menu"
    EDIT_VALUE = "edit_value"
    ADD_NAME = "add_name"
    TERMINATED = "terminated"


class SessionOutcome(str, enum.Enum):
    PRINTED = "printed"
    QUIT = "quit"


@dataclass
class EditorSession:
    """One interactive editing run over a directive set.

    The directive set is mutated in place. ``persist`` receives the final
    policy string on the print-and-exit path only; it defaults to writing
    ``output_file``.
    """

    directives: Directives
    io: EditorIO
    output_file: str = "generated_csp.txt"
    persist: Callable[[str], object] | None = None
    state: EditorState = EditorState.MENU
    selected: str | None = None
    outcome: SessionOutcome | None = None
    result: str | None = None
    _handlers: dict[EditorState, Callable[[], EditorState]] = field(
        init=False, repr=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        if self.persist is None:
            self.persist = partial(write_policy_file, self.output_file)
        self._handlers = {
            EditorState.MENU: self._menu,
            EditorState.EDIT_VALUE: self._edit_value,
            EditorState.ADD_NAME: self._add_name,
        }

    @property
    def finished(self) -> bool:
        return self.state is EditorState.TERMINATED

    def run(self) -> Directives:
        """Drive the session until it terminates and return the directive set."""
        while not self.finished:
            self.step()
        return self.directives

    def step(self) -> EditorState:
        """Run the handler for the current state once and move to the next state."""
        if self.finished:
            return self.state
        handler = self._handlers[self.state]
        try:
            self.state = handler()
        except (EOFError, KeyboardInterrupt):
            logger.debug("input_closed", state=self.state.value)
            self.io.emit("")
            self.state = self._quit()
        return self.state

    # ── MENU ─────────────────────────────────────────────────────────────

    def show_menu(self) -> None:
        self.io.emit(f"Your CSP has {len(self.directives)} directives.", style="cyan")
        for position, (name, values) in enumerate(self.directives.items(), 1):
            self.io.emit(
                Text.assemble(f"{position}: ", (name, "yellow"), f" - {' '.join(values)}")
            )
        self.io.emit("A: Add a new directive", style="green")
        self.io.emit("P: Print the full CSP string and exit", style="green")
        self.io.emit("Q: Quit the application", style="red")

    def _menu(self) -> EditorState:
        self.show_menu()
        answer = self.io.prompt(MENU_PROMPT).strip()
        command = answer.upper()
        if command == "P":
            return self._print_and_exit()
        if command == "Q":
            return self._quit()
        if command == "A":
            return EditorState.ADD_NAME

        selected = self._directive_at(answer)
        if selected is None:
            logger.debug("invalid_selection", answer=answer, count=len(self.directives))
            self.io.emit("Invalid selection. Please try again.")
            return EditorState.MENU
        self.selected = selected
        return EditorState.EDIT_VALUE

    def _directive_at(self, answer: str) -> str | None:
        """Map a 1-based menu position (ASCII digits only) to a directive name."""
        if not (answer.isascii() and answer.isdigit()):
            return None
        position = int(answer)
        if not 1 <= position <= len(self.directives):
            return None
        return list(self.directives)[position - 1]

    # ── EDIT_VALUE / ADD_NAME ────────────────────────────────────────────

    def _edit_value(self) -> EditorState:
        name = self.selected
        current = " ".join(self.directives[name])
        line = self.io.prompt(
            Text.assemble("Edit the value for ", (name, "yellow"), f" (current: {current}): ")
        )
        self.directives[name] = split_tokens(line)
        logger.debug("directive_edited", directive=name, values=self.directives[name])
        self.selected = None
        return EditorState.MENU

    def _add_name(self) -> EditorState:
        tokens = split_tokens(self.io.prompt(ADD_PROMPT))
        if not tokens:
            logger.debug("invalid_directive")
            self.io.emit("Invalid directive. Please try again.")
            return EditorState.ADD_NAME
        name, *values = tokens
        self.directives[name] = values
        logger.debug("directive_added", directive=name, values=values)
        return EditorState.MENU

    # ── TERMINATED ───────────────────────────────────────────────────────

    def _print_and_exit(self) -> EditorState:
        final = build_csp(self.directives)
        self.result = final
        self.outcome = SessionOutcome.PRINTED

        saved = True
        try:
            self.persist(final)
        except OSError as exc:
            saved = False
            logger.error("policy_write_failed", path=self.output_file, error=str(exc))

        self.io.emit("")
        if saved:
            self.io.emit(f"Final CSP String (also saved to '{self.output_file}'):", style="cyan")
        else:
            self.io.emit(f"Could not save the CSP to '{self.output_file}'.", style="red")
            self.io.emit("Final CSP String (copy and paste this line):", style="cyan")
        self.io.emit(final, style="green")
        if saved:
            self.io.emit("")
            self.io.emit(
                f"To copy the CSP to your clipboard, run: 'cat ./{self.output_file} | pbcopy'"
            )
        return EditorState.TERMINATED

    def _quit(self) -> EditorState:
        self.outcome = SessionOutcome.QUIT
        self.io.emit("Exiting the application.")
        return EditorState.TERMINATED


def run_session(directives: Directives, io: EditorIO, **kwargs) -> EditorSession:
    """Run an editing session to completion and return it."""
    session = EditorSession(directives=directives, io=io, **kwargs)
    session.run()
    return session
