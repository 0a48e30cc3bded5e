"""Interactive prompt chains as plain data.

A prompt sequence is an ordered list of ``Question`` records. Rendering is
delegated to a ``PromptRenderer``; the default one drives ``questionary``.
Tests swap in a scripted renderer so the config logic runs without a TTY.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import questionary


class QuestionKind(str, Enum):
    INPUT = "input"
    PASSWORD = "password"
    CONFIRM = "confirm"
    SELECT = "select"


@dataclass(frozen=True)
class Question:
    name: str
    kind: QuestionKind
    message: str
    default: Any = None
    choices: tuple[str, ...] = field(default_factory=tuple)
    required: bool = False


def non_empty(text: str) -> bool | str:
    """questionary validator: ``True`` or the message shown under the prompt."""
    return bool(text.strip()) or "A value is required"


class PromptRenderer(Protocol):
    def ask(self, questions: Sequence[Question]) -> dict[str, Any]: ...


class QuestionaryRenderer:
    """Render questions in the terminal. Ctrl-C raises ``KeyboardInterrupt``."""

    @staticmethod
    def _validator(q: Question) -> Callable[[str], bool | str] | None:
        return non_empty if q.required else None

    def _question(self, q: Question) -> questionary.Question:
        if q.kind is QuestionKind.PASSWORD:
            return questionary.password(q.message, validate=self._validator(q))
        if q.kind is QuestionKind.CONFIRM:
            return questionary.confirm(q.message, default=bool(q.default))
        if q.kind is QuestionKind.SELECT:
            return questionary.select(q.message, choices=list(q.choices), default=q.default)
        return questionary.text(
            q.message,
            default="" if q.default is None else str(q.default),
            validate=self._validator(q),
        )

    def ask(self, questions: Sequence[Question]) -> dict[str, Any]:
        answers: dict[str, Any] = {}
        for q in questions:
            answers[q.name] = self._question(q).unsafe_ask()
        return answers


CONFIG_QUESTIONS: tuple[Question, ...] = (
    Question(
        "host",
        QuestionKind.INPUT,
        "Provide your jira host:",
        default="example.atlassian.net",
        required=True,
    ),
    Question(
        "username",
        QuestionKind.INPUT,
        "Please provide your jira username:",
        default="example@domain.com",
        required=True,
    ),
    Question("password", QuestionKind.PASSWORD, "Enter your jira API token:", required=True),
    Question("protocol", QuestionKind.CONFIRM, "Enable HTTPS Protocol?", default=False),
)

PASSWORD_QUESTIONS: tuple[Question, ...] = (
    Question("password", QuestionKind.PASSWORD, "Type your jira password:", required=True),
)


def board_question(names: Sequence[str]) -> Question:
    return Question("board", QuestionKind.SELECT, "Board:", choices=tuple(names))


__all__ = [
    "CONFIG_QUESTIONS",
    "PASSWORD_QUESTIONS",
    "PromptRenderer",
    "Question",
    "QuestionKind",
    "QuestionaryRenderer",
    "board_question",
    "non_empty",
]
