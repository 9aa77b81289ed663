from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(StrEnum):
    USAGE = "usage"
    COMMAND = "command"
    REMOTE = "remote"


@dataclass(slots=True, frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(slots=True, frozen=True)
class Aborted:
    reason: str = ""


@dataclass(slots=True, frozen=True)
class Failed:
    kind: ErrorKind
    message: str


Outcome = Union[Success[T], Aborted, Failed]
