from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from notevault.core.access import NoteAccessGuard, Operation
from notevault.core.collaboration import CollaborationRegistry
from notevault.core.locking import present_note
from notevault.core.outcomes import Deny, Err, Ok, Permit, Reason, Result, err_from
from notevault.storage.folders_store import FoldersStore
from notevault.storage.notes_store import NotesStore

logger = logging.getLogger(__name__)


class NoteService:
    """Note CRUD with access checks and folder counter upkeep.

    Folder counters move only after the note write succeeded: +1 on create
    into a folder, -1/+1 on a move, -1 on delete.
    """

    def __init__(
        self,
        notes: NotesStore,
        folders: FoldersStore,
        registry: CollaborationRegistry,
        guard: NoteAccessGuard,
    ):
        self._notes = notes
        self._folders = folders
        self._registry = registry
        self._guard = guard

    def _folder_belongs_to(self, folder_id: uuid.UUID, owner_id: str) -> bool:
        folder = self._folders.get(folder_id)
        return folder is not None and folder.owner_id == owner_id

    def create(
        self,
        actor_id: str,
        title: str,
        description: Optional[str] = None,
        folder_id: Optional[uuid.UUID] = None,
    ) -> Result:
        if folder_id is not None and not self._folder_belongs_to(folder_id, actor_id):
            return Err(Reason.NOT_FOUND, "Folder not found")

        note = self._notes.create(owner_id=actor_id, title=title, description=description, folder_id=folder_id)
        if folder_id is not None:
            self._folders.increment(folder_id)

        logger.info("Note %s created by %s", note.id, actor_id)
        return Ok(note)

    def get(self, actor_id: str, note_id: uuid.UUID) -> Result:
        note = self._notes.get(note_id)
        if note is None:
            return Err(Reason.NOT_FOUND, "Note not found")
        decision = self._guard.decide_for(actor_id, note, Operation.READ)
        if isinstance(decision, Deny):
            return err_from(decision)
        return Ok(note)

    def list_for_user(self, actor_id: str) -> list[dict[str, Any]]:
        """Own notes first, then notes shared with the user. Always redacted."""
        out = []
        for note in self._notes.list_by_owner(actor_id):
            out.append({**present_note(note), "is_collaboration": False})
        for note_id, _role in self._registry.list_by_user(actor_id):
            note = self._notes.get(note_id)
            if note is None:
                continue
            out.append({**present_note(note), "is_collaboration": True})
        return out

    def list_by_folder(self, actor_id: str, folder_id: uuid.UUID) -> list[dict[str, Any]]:
        out = []
        for note in self._notes.list_by_folder(folder_id):
            if isinstance(self._guard.decide_for(actor_id, note, Operation.READ), Permit):
                out.append(present_note(note))
        return out

    def update(self, actor_id: str, note_id: uuid.UUID, changes: dict[str, Any]) -> Result:
        """Apply ``changes`` (any of title, description, folder_id).

        A ``folder_id`` key set to None takes the note out of its folder.
        """
        note = self._notes.get(note_id)
        if note is None:
            return Err(Reason.NOT_FOUND, "Note not found")

        decision = self._guard.decide_for(actor_id, note, Operation.UPDATE)
        if isinstance(decision, Deny):
            return err_from(decision)

        new_folder = changes.get("folder_id")
        if new_folder is not None and not self._folder_belongs_to(new_folder, note.owner_id):
            return Err(Reason.NOT_FOUND, "Folder not found")

        if self._notes.update_fields(note_id, changes, require_unlocked=True) == 0:
            # locked or deleted between the guard and the write
            if self._notes.get(note_id) is None:
                return Err(Reason.NOT_FOUND, "Note not found")
            return Err(Reason.NOTE_LOCKED, "Note is locked. Unlock it before updating.")

        if "folder_id" in changes and note.folder_id != new_folder:
            if note.folder_id is not None:
                self._folders.decrement(note.folder_id)
            if new_folder is not None:
                self._folders.increment(new_folder)

        return Ok(self._notes.get(note_id))

    def delete(self, actor_id: str, note_id: uuid.UUID) -> Result:
        note = self._notes.get(note_id)
        if note is None:
            return Err(Reason.NOT_FOUND, "Note not found")

        decision = self._guard.decide_for(actor_id, note, Operation.DELETE)
        if isinstance(decision, Deny):
            return err_from(decision)

        if self._notes.delete(note_id) == 0:
            return Err(Reason.NOT_FOUND, "Note not found")
        # grant inserts re-check the note file, so none can land after this
        removed = self._registry.revoke_all(note_id)
        if note.folder_id is not None:
            self._folders.decrement(note.folder_id)

        logger.info("Note %s deleted by owner %s (%d collaborator grants removed)", note_id, actor_id, removed)
        return Ok(note)
