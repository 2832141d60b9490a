from uuid import UUID

from fastapi import APIRouter, Depends

from notevault.api import deps
from notevault.api.errors import unwrap
from notevault.models.collaborators import CollaborationOut, CollaboratorCreate, CollaboratorOut
from notevault.storage.event_log import Event
from notevault.utils.jwt_auth import get_current_user

router = APIRouter(tags=["collaborators"])


@router.get("/my-collaborations", response_model=list[CollaborationOut])
def my_collaborations(user_id: str = Depends(get_current_user)) -> list[CollaborationOut]:
    return [CollaborationOut(**c) for c in deps.sharing.my_collaborations(user_id)]


@router.post("/notes/{note_id}/collaborators", response_model=CollaboratorOut, status_code=201)
def add_collaborator(
    note_id: UUID,
    payload: CollaboratorCreate,
    user_id: str = Depends(get_current_user),
) -> CollaboratorOut:
    grant = unwrap(deps.sharing.add_collaborator_by_email(
        actor_id=user_id,
        note_id=note_id,
        email=payload.email,
        role=payload.role,
    ))

    deps.event_log.emit(Event(
        event_type="COLLABORATOR_ADDED",
        user_id=user_id,
        note_id=str(note_id),
        meta={"collaborator": grant.user_id, "role": grant.role},
    ))

    collaborator = deps.users.get(grant.user_id)
    return CollaboratorOut(
        **grant.to_dict(),
        username=collaborator.username if collaborator else None,
        email=collaborator.email if collaborator else None,
    )


@router.get("/notes/{note_id}/collaborators", response_model=list[CollaboratorOut])
def list_collaborators(note_id: UUID, user_id: str = Depends(get_current_user)) -> list[CollaboratorOut]:
    entries = unwrap(deps.sharing.list_collaborators(user_id, note_id))
    return [CollaboratorOut(**e) for e in entries]


@router.delete("/notes/{note_id}/collaborators/{collaborator_id}", status_code=204)
def remove_collaborator(
    note_id: UUID,
    collaborator_id: str,
    user_id: str = Depends(get_current_user),
) -> None:
    unwrap(deps.sharing.remove_collaborator(user_id, note_id, collaborator_id))

    deps.event_log.emit(Event(
        event_type="COLLABORATOR_REMOVED",
        user_id=user_id,
        note_id=str(note_id),
        meta={"collaborator": collaborator_id},
    ))
    return None
