# gamesincommon/core/outcome.py

"""Discriminated result for the fetch, merge and filter phases.

Phases never raise across their boundary. A caller checks ``status``
to tell a finished run (possibly with an empty answer) apart from a
cancelled one or one that could not start.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

__all__ = ["Outcome", "OutcomeStatus"]

T = TypeVar("T")


class OutcomeStatus(Enum):
    """How a phase ended."""

    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a phase.

    Attributes:
        status: How the phase ended.
        value: Phase result; only set when status is SUCCEEDED.
        error: Human-readable reason for a FAILED outcome.
        warnings: Non-fatal problems, e.g. accounts excluded from the
            intersection or games whose filters could not be resolved.
    """

    status: OutcomeStatus
    value: T | None = None
    error: str = ""
    warnings: tuple[str, ...] = ()

    @classmethod
    def succeeded(cls, value: T, warnings: tuple[str, ...] | list[str] = ()) -> Outcome[T]:
        return cls(OutcomeStatus.SUCCEEDED, value=value, warnings=tuple(warnings))

    @classmethod
    def cancelled(cls, warnings: tuple[str, ...] | list[str] = ()) -> Outcome[T]:
        return cls(OutcomeStatus.CANCELLED, warnings=tuple(warnings))

    @classmethod
    def failed(cls, error: str, warnings: tuple[str, ...] | list[str] = ()) -> Outcome[T]:
        return cls(OutcomeStatus.FAILED, error=error, warnings=tuple(warnings))

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED

    @property
    def is_cancelled(self) -> bool:
        return self.status is OutcomeStatus.CANCELLED
