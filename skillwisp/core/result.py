"""Explicit success/failure values for the install pipeline.

Each install stage returns ``Ok(value)`` or ``Err(error)`` so that failure
paths show up in signatures. Only the outermost layer of the installer
turns an unexpected exception into a failed result.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from skillwisp.exceptions import SkillwispError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: SkillwispError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error)


Result = Union[Ok[T], Err]
