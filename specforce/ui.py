"""User interaction: the UI protocol and a plain console implementation."""

from __future__ import annotations

import sys
from typing import Callable, Protocol, TextIO


class UI(Protocol):
    """Interface for talking to the user and reporting progress."""

    def log(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def sub_task(self, message: str) -> None:
        """Report a smaller unit of work."""

    def start_spinner(self, message: str) -> None: ...

    def stop_spinner(self) -> None: ...

    def confirm(self, question: str) -> bool: ...


class ConsoleUI:
    """A UI that writes plain lines to text streams and reads answers from input."""

    def __init__(
        self,
        out: TextIO | None = None,
        err: TextIO | None = None,
        input_func: Callable[[str], str] | None = None,
    ) -> None:
        self._out = out
        self._err = err
        self._input = input_func if input_func is not None else input
        self.spinner_message: str | None = None

    @property
    def spinning(self) -> bool:
        return self.spinner_message is not None

    def _write(self, stream: TextIO | None, default: TextIO, text: str) -> None:
        target = stream if stream is not None else default
        target.write(text + "\n")
        target.flush()

    def log(self, message: str) -> None:
        self._write(self._out, sys.stdout, message)

    def warn(self, message: str) -> None:
        self._write(self._err, sys.stderr, f"Warning: {message}")

    def error(self, message: str) -> None:
        self._write(self._err, sys.stderr, f"Error: {message}")

    def success(self, message: str) -> None:
        self._write(self._out, sys.stdout, f"[OK] {message}")

    def sub_task(self, message: str) -> None:
        self._write(self._out, sys.stdout, f"  > {message}")

    def start_spinner(self, message: str) -> None:
        self.spinner_message = message
        self._write(self._out, sys.stdout, f"{message}...")

    def stop_spinner(self) -> None:
        self.spinner_message = None

    def confirm(self, question: str) -> bool:
        try:
            answer = self._input(f"{question} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")