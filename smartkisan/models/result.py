"""
Tagged outcome returned by the service layer to the routers.

    Ok(value)               upstream data used as-is
    Degraded(value, reason) a usable substitute (mock weather, fallback advice)
    Invalid(message)        the request was malformed; no substitute is produced
"""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def degraded(self) -> bool:
        return False


@dataclass(frozen=True)
class Degraded(Generic[T]):
    value: T
    reason: str

    @property
    def degraded(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    message: str


Outcome = Union[Ok[T], Degraded[T], Invalid]
