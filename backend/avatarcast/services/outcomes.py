from __future__ import annotations
"""Terminal results of one generation attempt."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Inserted:
    """The motion asset was committed."""

    title: str


@dataclass(frozen=True)
class InsertedDegraded:
    """The static fallback asset was committed instead of the motion asset."""

    title: str
    reason: str


@dataclass(frozen=True)
class Failed:
    """The attempt ended without a committed asset."""

    error: BaseException

    @property
    def message(self) -> str:
        text = str(self.error)
        return text or type(self.error).__name__


Outcome = Union[Inserted, InsertedDegraded, Failed]
