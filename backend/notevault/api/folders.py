from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from notevault.api import deps
from notevault.models.folders import FolderCreate, FolderOut, FolderUpdate
from notevault.storage.event_log import Event
from notevault.storage.folders_store import Folder
from notevault.utils.jwt_auth import get_current_user

router = APIRouter(prefix="/folders", tags=["folders"])


def _own_folder(folder_id: UUID, user_id: str) -> Folder:
    folder = deps.folders.get(folder_id)
    if folder is None or folder.owner_id != user_id:
        # do not leak other users' folders
        raise HTTPException(status_code=404, detail="Folder not found")
    return folder


@router.post("", response_model=FolderOut, status_code=201)
def create_folder(payload: FolderCreate, user_id: str = Depends(get_current_user)) -> FolderOut:
    folder = deps.folders.create(owner_id=user_id, name=payload.name, tag=payload.tag)

    deps.event_log.emit(Event(
        event_type="FOLDER_CREATED",
        user_id=user_id,
        meta={"folder_id": str(folder.id)},
    ))

    return FolderOut(**folder.to_dict())


@router.get("", response_model=list[FolderOut])
def list_folders(user_id: str = Depends(get_current_user)) -> list[FolderOut]:
    return [FolderOut(**f.to_dict()) for f in deps.folders.list_by_owner(user_id)]


@router.get("/{folder_id}", response_model=FolderOut)
def get_folder(folder_id: UUID, user_id: str = Depends(get_current_user)) -> FolderOut:
    return FolderOut(**_own_folder(folder_id, user_id).to_dict())


@router.put("/{folder_id}", response_model=FolderOut)
def update_folder(folder_id: UUID, payload: FolderUpdate, user_id: str = Depends(get_current_user)) -> FolderOut:
    _own_folder(folder_id, user_id)
    # notes_amount is maintained by note operations only
    updated = deps.folders.rename(folder_id, name=payload.name, tag=payload.tag)
    if updated is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return FolderOut(**updated.to_dict())


@router.delete("/{folder_id}", status_code=204)
def delete_folder(folder_id: UUID, user_id: str = Depends(get_current_user)) -> None:
    _own_folder(folder_id, user_id)
    deps.folders.delete(folder_id)

    deps.event_log.emit(Event(
        event_type="FOLDER_DELETED",
        user_id=user_id,
        meta={"folder_id": str(folder_id)},
    ))
    return None
