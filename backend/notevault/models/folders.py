from typing import Optional

from pydantic import BaseModel, Field


class FolderCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    tag: Optional[str] = Field(default=None, max_length=50)


class FolderUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    tag: Optional[str] = Field(default=None, max_length=50)


class FolderOut(BaseModel):
    id: str
    owner_id: str
    name: str
    tag: Optional[str]
    notes_amount: int
