"""Access decisions for (user, note, operation) triples.

``decide`` is pure: it only looks at the note it is given and whether the
actor holds a collaborator grant on it. ``NoteAccessGuard`` loads both from
the stores and calls ``decide``.

Ownership is checked before collaboration. A user who is neither owner nor
collaborator gets ``NotAuthorized`` for every operation, including the
owner-only ones, so strangers cannot tell an owner-only refusal from an
invisible note.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Optional

from notevault.core.outcomes import Decision, Deny, Permit, Reason, Role
from notevault.storage.collaborators_store import CollaboratorsStore, Grant
from notevault.storage.notes_store import Note, NotesStore

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    READ = "read"
    READ_CONTENT = "read_content"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE_COLLABORATORS = "manage_collaborators"
    LOCK = "lock"
    UNLOCK = "unlock"
    VERIFY_PIN = "verify_pin"


# Operations reserved to the owner. Collaborators get OwnerOnly.
_OWNER_ONLY = frozenset(
    {Operation.DELETE, Operation.MANAGE_COLLABORATORS, Operation.LOCK, Operation.UNLOCK}
)


def decide(actor_id: str, note: Note, operation: Operation, grant: Optional[Grant]) -> Decision:
    if note.owner_id == actor_id:
        role = Role.OWNER
    elif grant is not None and grant.note_id == note.id and grant.user_id == actor_id:
        role = Role.COLLABORATOR
    else:
        return Deny(Reason.NOT_AUTHORIZED)

    if operation in _OWNER_ONLY and role is not Role.OWNER:
        return Deny(Reason.OWNER_ONLY)

    if operation in (Operation.UPDATE, Operation.MANAGE_COLLABORATORS) and note.is_locked:
        return Deny(Reason.NOTE_LOCKED)

    if operation is Operation.LOCK and note.is_locked:
        return Deny(Reason.ALREADY_LOCKED)

    return Permit(role)


class NoteAccessGuard:
    def __init__(self, notes: NotesStore, collaborators: CollaboratorsStore):
        self._notes = notes
        self._collaborators = collaborators

    def decide_for(self, actor_id: str, note: Note, operation: Operation) -> Decision:
        """Decide for a note the caller already loaded."""
        grant = None
        if note.owner_id != actor_id:
            grant = self._collaborators.find(note.id, actor_id)

        decision = decide(actor_id, note, operation, grant)
        if isinstance(decision, Deny):
            logger.info(
                "Denied %s on note %s for user %s: %s",
                operation.value, note.id, actor_id, decision.reason.value,
            )
        return decision

    def decide_access(self, actor_id: str, note_id: uuid.UUID, operation: Operation) -> Decision:
        note = self._notes.get(note_id)
        if note is None:
            return Deny(Reason.NOT_FOUND)
        return self.decide_for(actor_id, note, operation)
