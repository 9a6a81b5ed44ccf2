"""
Tagged lookup results.

Repositories return one of these from ``find()`` so callers can tell
"no such row" apart from "the store call failed" without catching.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    id: str


@dataclass(frozen=True)
class Failed:
    detail: str


Lookup = Union[Found[T], NotFound, Failed]
