"""Operator I/O boundary.

Business logic only talks to a ``Prompter``; the console implementation is
the single place that reads the terminal.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, Protocol, TextIO

from ..errors import OperatorCancelled

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    def confirm(self, question: str, *, default: bool = False) -> bool:
        ...

    def ask(self, question: str) -> str:
        ...

    def read_block(self, instructions: str) -> str:
        ...


def parse_yes_no(answer: str, default: bool) -> Optional[bool]:
    a = answer.strip().lower()
    if not a:
        return default
    if a[0] == "y":
        return True
    if a[0] == "n":
        return False
    return None


class ConsolePrompter:
    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] = input,
        stream: Optional[TextIO] = None,
    ) -> None:
        self._input = input_fn
        self._stream = stream

    def confirm(self, question: str, *, default: bool = False) -> bool:
        suffix = "(Y/n)" if default else "(y/N)"
        while True:
            try:
                raw = self._input(f"{question} {suffix}: ")
            except EOFError:
                # Closed stdin is no answer, not the default.
                logger.warning("No answer to %r (end of input); treating it as no", question)
                return False
            answer = parse_yes_no(raw, default)
            if answer is not None:
                logger.debug("Prompt %r -> %s", question, answer)
                return answer
            print("Please answer y or n.")

    def ask(self, question: str) -> str:
        try:
            return self._input(f"{question}: ").strip()
        except EOFError:
            return ""

    def read_block(self, instructions: str) -> str:
        print(instructions)
        stream = self._stream or sys.stdin
        return stream.read()


class AssumeYesPrompter:
    """Non-interactive: every confirmation takes its default answer."""

    def __init__(self, fallback: Optional[Prompter] = None) -> None:
        self._fallback = fallback or ConsolePrompter()

    def confirm(self, question: str, *, default: bool = False) -> bool:
        logger.info("%s -> %s (assumed)", question, "yes" if default else "no")
        return default

    def ask(self, question: str) -> str:
        return self._fallback.ask(question)

    def read_block(self, instructions: str) -> str:
        return self._fallback.read_block(instructions)


def require_continue(prompter: Prompter, message: str) -> None:
    """Opening gate; declining cancels the whole program."""

    logger.info(message)
    if not prompter.confirm("Do you want to continue?", default=isinstance(prompter, AssumeYesPrompter)):
        raise OperatorCancelled("Operation cancelled by user.")
