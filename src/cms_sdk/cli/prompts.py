"""Interactive prompt primitives reading from an injectable line source."""

from __future__ import annotations

from typing import Callable, Optional, Protocol, TextIO

from cms_sdk.errors import InputValidationError

_YES = {"yes", "y"}
_NO = {"no", "n"}


class LineSource(Protocol):
    def readline(self) -> str:
        """Return the next answer line, or "" once input is exhausted."""


class StreamLineSource:
    """Line source backed by a text stream such as ``sys.stdin``."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def readline(self) -> str:
        return self._stream.readline()


class Prompter:
    def __init__(self, source: LineSource, stdout: TextIO) -> None:
        self._source = source
        self._stdout = stdout

    def ask(self, question: str) -> str:
        print(question, end="", file=self._stdout, flush=True)
        line = self._source.readline()
        if line == "":
            raise InputValidationError("input ended before the prompt was answered")
        return line.strip()

    def say(self, message: str) -> None:
        print(message, file=self._stdout)

    def confirm(self, question: str, default: str) -> bool:
        """Ask a yes/no question; an empty answer selects ``default``."""
        if default not in {"yes", "no"}:
            raise ValueError("default must be 'yes' or 'no'")
        while True:
            answer = self.ask(f"{question} (yes/no) [{default}]: ").lower() or default
            if answer in _YES:
                return True
            if answer in _NO:
                return False
            self.say("Invalid entry, please answer yes or no.")

    def choose(
        self,
        menu: str,
        *,
        low: int,
        high: int,
        label: str,
    ) -> int:
        """Loop until an integer in ``[low, high]`` is entered."""
        while True:
            raw = self.ask(f"{menu}:  ")
            try:
                value = int(raw)
            except ValueError:
                self.say("Invalid entry, please try again.")
                continue
            if value < low or value > high:
                self.say(f"Invalid {label} entered, please try again.")
                continue
            return value

    def choose_confirmed(
        self,
        menu: str,
        *,
        low: int,
        high: int,
        label: str,
        describe: Optional[Callable[[int], str]] = None,
    ) -> int:
        """Run :meth:`choose` until the administrator keeps the choice."""
        while True:
            value = self.choose(menu, low=low, high=high, label=label)
            shown = describe(value) if describe else str(value)
            if self.confirm(f'Your current {label} setting is: "{shown}" Keep this?', "yes"):
                return value

    def build_list(self, current: list[str], *, item_label: str) -> list[str]:
        """Append items to a copy of ``current`` until the running list is kept."""
        items = list(current)
        while True:
            item = self.ask(f"Add another {item_label}: ")
            if not item:
                self.say("Invalid entry, please try again.")
                continue
            if not self.confirm(f'The {item_label} is: "{item}" Add this?', "yes"):
                continue
            items.append(item)
            if self.confirm(f"The current {item_label}s are: {items} Keep this?", "yes"):
                return items

    def pause(self, message: str) -> None:
        print(message, end="", file=self._stdout, flush=True)
        self._source.readline()
