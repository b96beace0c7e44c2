from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .guidelines import GuidelineResult


class AutoMergeError(Exception):
    """Base class for every failure the decision engine surfaces to its caller."""


class PreconditionKind(str, Enum):
    SUBMISSION_NOT_OPEN = "submission_not_open"
    AUTHOR_NOT_AUTHORIZED = "author_not_authorized"


class PreconditionFailed(AutoMergeError):
    """The submission cannot be evaluated at all. Nothing was written externally."""

    def __init__(self, kind: PreconditionKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"{kind.value}: {message}")


class GuidelinesNotMet(AutoMergeError):
    """One or more guidelines failed. Raised after the final status and comment are written."""

    def __init__(self, failures: tuple["GuidelineResult", ...]):
        self.failures = failures
        super().__init__(f"The automerge guidelines were not met ({len(failures)} failing).")

    @property
    def messages(self) -> list[str]:
        return [f.message for f in self.failures]


class ExternalCallExhausted(AutoMergeError):
    def __init__(self, label: str, attempts: int, last_error: BaseException):
        self.label = label
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{label} failed after {attempts} attempt(s): {type(last_error).__name__}: {last_error}"
        )


class MalformedTitle(AutoMergeError, ValueError):
    pass


class ConfigError(AutoMergeError, ValueError):
    pass
