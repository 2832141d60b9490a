from typing import Optional

from pydantic import BaseModel, Field


class CollaboratorCreate(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    # open set of roles; "editor" is the only one the app hands out today
    role: str = Field(default="editor", pattern="^[a-z_]{1,32}$")


class CollaboratorOut(BaseModel):
    grant_id: str
    note_id: str
    user_id: str
    added_by: str
    role: str
    created_at: str
    username: Optional[str] = None
    email: Optional[str] = None


class CollaborationOut(BaseModel):
    note_id: str
    title: str
    owner_id: str
    is_locked: bool
    role: str
