from uuid import UUID

from fastapi import APIRouter, Depends

from notevault.api import deps
from notevault.api.errors import unwrap
from notevault.core.locking import present_note
from notevault.models.notes import (
    LockRequest,
    NoteCreate,
    NoteListItem,
    NoteOut,
    NoteUpdate,
    PinRequest,
    UnlockOut,
)
from notevault.storage.event_log import Event
from notevault.utils.jwt_auth import get_current_user

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("", response_model=NoteOut, status_code=201)
def create_note(payload: NoteCreate, user_id: str = Depends(get_current_user)) -> NoteOut:
    note = unwrap(deps.notes.create(
        actor_id=user_id,
        title=payload.title,
        description=payload.description,
        folder_id=payload.folder_id,
    ))

    deps.event_log.emit(Event(
        event_type="NOTE_CREATED",
        user_id=user_id,
        note_id=str(note.id),
        meta={"folder_id": str(note.folder_id) if note.folder_id else None},
    ))

    return NoteOut(**present_note(note))


@router.get("", response_model=list[NoteListItem])
def list_notes(user_id: str = Depends(get_current_user)) -> list[NoteListItem]:
    return [NoteListItem(**n) for n in deps.notes.list_for_user(user_id)]


@router.get("/folder/{folder_id}", response_model=list[NoteOut])
def list_notes_in_folder(folder_id: UUID, user_id: str = Depends(get_current_user)) -> list[NoteOut]:
    return [NoteOut(**n) for n in deps.notes.list_by_folder(user_id, folder_id)]


@router.get("/{note_id}", response_model=NoteOut)
def get_note(note_id: UUID, user_id: str = Depends(get_current_user)) -> NoteOut:
    note = unwrap(deps.notes.get(user_id, note_id))
    return NoteOut(**present_note(note))


@router.put("/{note_id}", response_model=NoteOut)
def update_note(note_id: UUID, payload: NoteUpdate, user_id: str = Depends(get_current_user)) -> NoteOut:
    changes = payload.model_dump(exclude_unset=True)
    # title/description sent as null mean "leave unchanged"; folder_id null means "no folder"
    changes = {k: v for k, v in changes.items() if v is not None or k == "folder_id"}

    updated = unwrap(deps.notes.update(user_id, note_id, changes))

    deps.event_log.emit(Event(
        event_type="NOTE_UPDATED",
        user_id=user_id,
        note_id=str(note_id),
        meta={"fields": sorted(changes), "version": updated.version},
    ))

    return NoteOut(**present_note(updated))


@router.delete("/{note_id}", status_code=204)
def delete_note(note_id: UUID, user_id: str = Depends(get_current_user)) -> None:
    unwrap(deps.notes.delete(user_id, note_id))

    deps.event_log.emit(Event(
        event_type="NOTE_DELETED",
        user_id=user_id,
        note_id=str(note_id),
    ))

    return None


@router.post("/{note_id}/lock", response_model=NoteOut)
def lock_note(note_id: UUID, payload: LockRequest, user_id: str = Depends(get_current_user)) -> NoteOut:
    note = unwrap(deps.locks.lock(note_id, user_id, payload.pin))

    deps.event_log.emit(Event(
        event_type="NOTE_LOCKED",
        user_id=user_id,
        note_id=str(note_id),
    ))

    return NoteOut(**present_note(note))


@router.post("/{note_id}/unlock", response_model=UnlockOut)
def unlock_note(note_id: UUID, payload: PinRequest, user_id: str = Depends(get_current_user)) -> UnlockOut:
    outcome = unwrap(deps.locks.unlock(note_id, user_id, payload.pin))

    deps.event_log.emit(Event(
        event_type="PIN_VERIFIED" if outcome.temporary else "NOTE_UNLOCKED",
        user_id=user_id,
        note_id=str(note_id),
        meta={"via": "unlock"},
    ))

    # PIN was verified, so the content is disclosed for this response
    return UnlockOut(temporary=outcome.temporary, note=NoteOut(**present_note(outcome.note, redact=False)))


@router.post("/{note_id}/view", response_model=NoteOut)
def view_note(note_id: UUID, payload: PinRequest, user_id: str = Depends(get_current_user)) -> NoteOut:
    note = unwrap(deps.locks.view(note_id, user_id, payload.pin))

    if note.is_locked:
        deps.event_log.emit(Event(
            event_type="PIN_VERIFIED",
            user_id=user_id,
            note_id=str(note_id),
            meta={"via": "view"},
        ))

    return NoteOut(**present_note(note, redact=False))
