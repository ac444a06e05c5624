"""Commit status value and its pending -> terminal lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cistatus.errors import StatusTransitionError


class StatusState(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


TERMINAL_STATES = frozenset({StatusState.SUCCESS, StatusState.FAILURE})


@dataclass
class CommitStatus:
    """The status attached to the wrapped commit.

    Starts as ``pending`` and moves to ``success`` or ``failure`` exactly once
    through :meth:`finish`. There is no way back to ``pending``.
    """

    context: str
    description: str
    target_url: str = ""
    state: StatusState = field(default=StatusState.PENDING, init=False)

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def finish(self, succeeded: bool) -> StatusState:
        if self.is_terminal:
            raise StatusTransitionError(f"Status '{self.context}' is already {self.state.value}")
        self.state = StatusState.SUCCESS if succeeded else StatusState.FAILURE
        return self.state

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "state": self.state.value,
            "description": self.description,
            "context": self.context,
        }
        if self.target_url:
            payload["target_url"] = self.target_url
        return payload
