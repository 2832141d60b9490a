"""PIN lock state machine for notes.

A note is either unlocked (the initial state) or locked. Locking stores a
salted one-way hash of the PIN; the PIN itself is never stored or logged.

Unlocking is asymmetric. The owner's correct PIN releases the lock for
everyone. A collaborator's correct PIN only proves they know it: the note
stays locked and the outcome is marked ``temporary``. ``view`` is the
read-only counterpart that never changes state for anyone.

Any note representation produced outside ``view``/``unlock`` must go through
``present_note`` so locked descriptions are replaced by a placeholder.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from notevault import config
from notevault.core.access import NoteAccessGuard, Operation
from notevault.core.outcomes import Deny, Err, Ok, Reason, Result, err_from
from notevault.storage.notes_store import Note, NotesStore
from notevault.utils.hashing import hash_pin, verify_pin

logger = logging.getLogger(__name__)


def present_note(note: Note, redact: bool = True) -> dict[str, Any]:
    """Client-facing dict for a note. Never contains the PIN hash."""
    data = note.to_dict()
    del data["lock_pin_hash"]
    if redact and note.is_locked:
        data["description"] = config.LOCKED_PLACEHOLDER
    return data


@dataclass(frozen=True)
class UnlockOutcome:
    note: Note
    temporary: bool


class LockStateMachine:
    def __init__(self, notes: NotesStore, guard: NoteAccessGuard, pin_min_length: Optional[int] = None):
        self._notes = notes
        self._guard = guard
        wanted = config.PIN_MIN_LENGTH if pin_min_length is None else pin_min_length
        self.pin_min_length = max(config.PIN_LENGTH_FLOOR, wanted)

    def lock(self, note_id: uuid.UUID, actor_id: str, pin: Optional[str]) -> Result:
        decision = self._guard.decide_access(actor_id, note_id, Operation.LOCK)
        if isinstance(decision, Deny):
            return err_from(decision)

        if not pin or len(pin) < self.pin_min_length:
            return Err(Reason.PIN_TOO_SHORT, f"PIN must be at least {self.pin_min_length} characters")

        if self._notes.set_lock(note_id, hash_pin(pin)) == 0:
            # lost a race: the note was deleted or locked since the guard ran
            if self._notes.get(note_id) is None:
                return Err(Reason.NOT_FOUND, "Note not found")
            return Err(Reason.ALREADY_LOCKED, "Note is already locked")

        logger.info("Note %s locked by owner %s", note_id, actor_id)
        return Ok(self._notes.get(note_id))

    def unlock(self, note_id: uuid.UUID, actor_id: str, pin: Optional[str]) -> Result:
        note = self._notes.get(note_id)
        if note is None:
            return Err(Reason.NOT_FOUND, "Note not found")

        decision = self._guard.decide_for(actor_id, note, Operation.VERIFY_PIN)
        if isinstance(decision, Deny):
            return err_from(decision)

        if not note.is_locked:
            return Err(Reason.NOT_LOCKED, "Note is not locked")

        if not verify_pin(pin, self._notes.get_pin_hash(note_id)):
            logger.info("Invalid PIN for note %s from user %s", note_id, actor_id)
            return Err(Reason.INVALID_PIN, "Invalid PIN")

        if not decision.is_owner:
            logger.info("PIN verified for collaborator %s on note %s; note stays locked", actor_id, note_id)
            return Ok(UnlockOutcome(note=note, temporary=True))

        if self._notes.clear_lock(note_id) == 0:
            if self._notes.get(note_id) is None:
                return Err(Reason.NOT_FOUND, "Note not found")
            return Err(Reason.NOT_LOCKED, "Note is not locked")

        logger.info("Note %s unlocked by owner %s", note_id, actor_id)
        return Ok(UnlockOutcome(note=self._notes.get(note_id), temporary=False))

    def view(self, note_id: uuid.UUID, actor_id: str, pin: Optional[str] = None) -> Result:
        note = self._notes.get(note_id)
        if note is None:
            return Err(Reason.NOT_FOUND, "Note not found")

        decision = self._guard.decide_for(actor_id, note, Operation.READ_CONTENT)
        if isinstance(decision, Deny):
            return err_from(decision)

        if note.is_locked and not verify_pin(pin, self._notes.get_pin_hash(note_id)):
            logger.info("Invalid PIN for view of note %s by user %s", note_id, actor_id)
            return Err(Reason.INVALID_PIN, "Invalid PIN")

        return Ok(note)
