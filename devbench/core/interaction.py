"""
Interaction — every prompt and user-facing message goes through here.

Services and the dispatcher receive an Interaction instead of calling
input() or print().  The CLI passes a console implementation
(``devbench.ui.cli.console.ConsoleInteraction``); tests and
non-interactive callers pass a ScriptedInteraction with the answers
up front.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable


class Interaction(ABC):
    """Prompts and messages for one invocation."""

    @abstractmethod
    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question.  Anything but an explicit yes is no."""

    @abstractmethod
    def ask(self, prompt: str) -> str:
        """Ask for a line of text.  Empty string when the user just hits Enter."""

    @abstractmethod
    def message(self, level: str, text: str) -> None:
        """Show a message.  ``level`` is info, success, warn, error or plain."""

    def info(self, text: str) -> None:
        self.message("info", text)

    def success(self, text: str) -> None:
        self.message("success", text)

    def warn(self, text: str) -> None:
        self.message("warn", text)

    def error(self, text: str) -> None:
        self.message("error", text)

    def echo(self, text: str = "") -> None:
        self.message("plain", text)

    def line(self, text: str, is_stderr: bool = False) -> None:
        """Sink for streamed command output."""
        self.echo(text)


class ScriptedInteraction(Interaction):
    """Interaction with pre-recorded answers.

    Confirmations and text answers are consumed in order.  When a queue
    runs dry the safe answer is used: no, and an empty string.
    """

    def __init__(
        self,
        confirmations: Iterable[bool] = (),
        answers: Iterable[str] = (),
    ):
        self._confirmations = deque(confirmations)
        self._answers = deque(answers)
        self.prompts: list[str] = []
        self.messages: list[tuple[str, str]] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self._confirmations.popleft() if self._confirmations else False

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self._answers.popleft() if self._answers else ""

    def message(self, level: str, text: str) -> None:
        self.messages.append((level, text))

    def line(self, text: str, is_stderr: bool = False) -> None:
        self.messages.append(("stderr" if is_stderr else "stdout", text))

    @property
    def output(self) -> str:
        """Everything shown so far, one message per line."""
        return "\n".join(text for _, text in self.messages)

    def texts(self, level: str) -> list[str]:
        return [text for lvl, text in self.messages if lvl == level]
