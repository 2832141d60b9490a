from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

# bcrypt only reads the first 72 bytes of a secret
PIN_MAX_BYTES = 72


def _check_pin_bytes(pin: Optional[str]) -> Optional[str]:
    if pin is not None and len(pin.encode("utf-8")) > PIN_MAX_BYTES:
        raise ValueError(f"PIN must be at most {PIN_MAX_BYTES} bytes")
    return pin


class NoteCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=50_000)
    folder_id: Optional[UUID] = None


class NoteUpdate(BaseModel):
    # Only fields present in the request body are applied; folder_id: null
    # takes the note out of its folder.
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=50_000)
    folder_id: Optional[UUID] = None


class NoteOut(BaseModel):
    id: str
    owner_id: str
    title: str
    description: Optional[str]
    folder_id: Optional[str]
    is_locked: bool
    created_at: str
    updated_at: str
    version: int


class NoteListItem(NoteOut):
    is_collaboration: bool = False


class LockRequest(BaseModel):
    pin: str = Field(default="", max_length=PIN_MAX_BYTES)

    @field_validator("pin")
    @classmethod
    def pin_fits_hash(cls, v):
        return _check_pin_bytes(v)


class PinRequest(BaseModel):
    pin: Optional[str] = Field(default=None, max_length=PIN_MAX_BYTES)

    @field_validator("pin")
    @classmethod
    def pin_fits_hash(cls, v):
        return _check_pin_bytes(v)


class UnlockOut(BaseModel):
    temporary: bool
    note: NoteOut
