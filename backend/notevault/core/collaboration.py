"""Collaborator grants: the structural registry and the authorized service on top.

``CollaborationRegistry`` enforces only the grant invariants: at most
``MAX_COLLABORATORS`` live grants per note, one grant per (note, user), never
a grant to the note's owner, and grantees must exist in the identity
directory. It does not check who is asking.

``SharingService`` is what the HTTP layer calls: it runs the access guard
first (owner only, note unlocked) and then delegates to the registry.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from notevault import config
from notevault.core.access import NoteAccessGuard, Operation
from notevault.core.outcomes import Deny, Err, Ok, Reason, Result, err_from
from notevault.storage.collaborators_store import CollaboratorsStore, Grant
from notevault.storage.notes_store import NotesStore
from notevault.storage.users_store import UsersStore

logger = logging.getLogger(__name__)


class CollaborationRegistry:
    def __init__(
        self,
        store: CollaboratorsStore,
        notes: NotesStore,
        users: UsersStore,
    ):
        self._store = store
        self._notes = notes
        self._users = users

    def grant(
        self,
        note_id: uuid.UUID,
        grantee_user_id: str,
        granted_by_user_id: str,
        role: str = config.DEFAULT_COLLABORATOR_ROLE,
    ) -> Result:
        note = self._notes.get(note_id)
        if note is None:
            return Err(Reason.NOT_FOUND, "Note not found")
        if grantee_user_id == note.owner_id:
            return Err(Reason.SELF_GRANT_NOT_ALLOWED, "The owner cannot be added as a collaborator")
        if self._users.get(grantee_user_id) is None:
            return Err(Reason.UNKNOWN_USER, "User not found")

        grant, status = self._store.add_if_room(
            note_id=note_id,
            user_id=grantee_user_id,
            added_by=granted_by_user_id,
            role=role,
            limit=config.MAX_COLLABORATORS,
        )
        if status == "missing":
            return Err(Reason.NOT_FOUND, "Note not found")
        if status == "duplicate":
            return Err(Reason.ALREADY_COLLABORATOR, "User is already a collaborator")
        if status == "full":
            return Err(
                Reason.COLLABORATOR_LIMIT_EXCEEDED,
                f"Maximum {config.MAX_COLLABORATORS} collaborators allowed per note",
            )
        return Ok(grant)

    def revoke(self, note_id: uuid.UUID, user_id: str) -> bool:
        return self._store.remove(note_id, user_id) > 0

    def revoke_all(self, note_id: uuid.UUID) -> int:
        return self._store.remove_all(note_id)

    def list_by_note(self, note_id: uuid.UUID) -> list[Grant]:
        return self._store.find_by_note(note_id)

    def list_by_user(self, user_id: str) -> list[tuple[uuid.UUID, str]]:
        return [(g.note_id, g.role) for g in self._store.find_by_user(user_id)]

    def has_grant(self, note_id: uuid.UUID, user_id: str) -> bool:
        return self._store.find(note_id, user_id) is not None

    def count_live(self, note_id: uuid.UUID) -> int:
        return self._store.count(note_id)


class SharingService:
    def __init__(
        self,
        guard: NoteAccessGuard,
        registry: CollaborationRegistry,
        notes: NotesStore,
        users: UsersStore,
    ):
        self._guard = guard
        self._registry = registry
        self._notes = notes
        self._users = users

    def add_collaborator(
        self,
        actor_id: str,
        note_id: uuid.UUID,
        grantee_user_id: str,
        role: str = config.DEFAULT_COLLABORATOR_ROLE,
    ) -> Result:
        decision = self._guard.decide_access(actor_id, note_id, Operation.MANAGE_COLLABORATORS)
        if isinstance(decision, Deny):
            return err_from(decision)

        result = self._registry.grant(note_id, grantee_user_id, actor_id, role)
        if isinstance(result, Ok):
            logger.info("User %s added collaborator %s to note %s", actor_id, grantee_user_id, note_id)
        return result

    def add_collaborator_by_email(
        self,
        actor_id: str,
        note_id: uuid.UUID,
        email: str,
        role: str = config.DEFAULT_COLLABORATOR_ROLE,
    ) -> Result:
        # authorize before resolving the e-mail so strangers learn nothing about the directory
        decision = self._guard.decide_access(actor_id, note_id, Operation.MANAGE_COLLABORATORS)
        if isinstance(decision, Deny):
            return err_from(decision)

        user = self._users.find_by_email(email)
        if user is None:
            return Err(Reason.UNKNOWN_USER, "User with that email not found")
        return self.add_collaborator(actor_id, note_id, user.user_id, role)

    def remove_collaborator(self, actor_id: str, note_id: uuid.UUID, user_id: str) -> Result:
        decision = self._guard.decide_access(actor_id, note_id, Operation.MANAGE_COLLABORATORS)
        if isinstance(decision, Deny):
            return err_from(decision)

        if not self._registry.revoke(note_id, user_id):
            return Err(Reason.NOT_FOUND, "Collaborator not found")
        logger.info("User %s removed collaborator %s from note %s", actor_id, user_id, note_id)
        return Ok(True)

    def list_collaborators(self, actor_id: str, note_id: uuid.UUID) -> Result:
        decision = self._guard.decide_access(actor_id, note_id, Operation.READ)
        if isinstance(decision, Deny):
            return err_from(decision)

        out: list[dict[str, Any]] = []
        for grant in self._registry.list_by_note(note_id):
            user = self._users.get(grant.user_id)
            out.append({
                **grant.to_dict(),
                "username": user.username if user else None,
                "email": user.email if user else None,
            })
        return Ok(out)

    def my_collaborations(self, actor_id: str) -> list[dict[str, Any]]:
        """Notes shared with ``actor_id``. Descriptions are never included."""
        out: list[dict[str, Any]] = []
        for note_id, role in self._registry.list_by_user(actor_id):
            note = self._notes.get(note_id)
            if note is None:
                continue
            out.append({
                "note_id": str(note.id),
                "title": note.title,
                "owner_id": note.owner_id,
                "is_locked": note.is_locked,
                "role": role,
            })
        return out
