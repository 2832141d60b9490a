"""Tagged outcomes returned by the core services.

Every expected failure (a denied operation, a wrong PIN, a full collaborator
list) is a value, not an exception: services return ``Ok(value)`` or
``Err(reason)`` and the HTTP layer maps the reason to a status code.
Only infrastructure faults (I/O errors, hashing backend errors) raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class Reason(str, Enum):
    NOT_FOUND = "NotFound"
    NOT_AUTHORIZED = "NotAuthorized"
    OWNER_ONLY = "OwnerOnly"
    NOTE_LOCKED = "NoteLocked"
    ALREADY_LOCKED = "AlreadyLocked"
    NOT_LOCKED = "NotLocked"
    INVALID_PIN = "InvalidPin"
    PIN_TOO_SHORT = "PinTooShort"
    ALREADY_COLLABORATOR = "AlreadyCollaborator"
    COLLABORATOR_LIMIT_EXCEEDED = "CollaboratorLimitExceeded"
    SELF_GRANT_NOT_ALLOWED = "SelfGrantNotAllowed"
    UNKNOWN_USER = "UnknownUser"


class Role(str, Enum):
    """How an actor relates to a note."""

    OWNER = "owner"
    COLLABORATOR = "collaborator"


@dataclass(frozen=True)
class Permit:
    role: Role

    @property
    def is_owner(self) -> bool:
        return self.role is Role.OWNER


@dataclass(frozen=True)
class Deny:
    reason: Reason


Decision = Union[Permit, Deny]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    reason: Reason
    detail: str = ""


Result = Union[Ok[Any], Err]


def err_from(decision: Deny, detail: str = "") -> Err:
    return Err(reason=decision.reason, detail=detail)
