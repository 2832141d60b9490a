import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

from notevault.storage.files import atomic_write_json, note_path, notes_dir, write_lock

# Fields a caller may change through update_fields(). Lock fields and
# ownership have their own mutators or are immutable.
UPDATABLE_FIELDS = ("title", "description", "folder_id")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _next_timestamp(previous: str) -> str:
    # updated_at must strictly advance even if the clock does not
    now = _utc_now()
    prev = datetime.fromisoformat(previous)
    if now <= prev:
        now = prev + timedelta(microseconds=1)
    return now.isoformat()


@dataclass(frozen=True)
class Note:
    id: uuid.UUID
    owner_id: str
    title: str
    description: Optional[str]
    folder_id: Optional[uuid.UUID]
    is_locked: bool
    lock_pin_hash: Optional[str]
    created_at: str
    updated_at: str
    version: int

    def to_dict(self) -> dict[str, Any]:
        """Full persisted form, including the PIN hash. Never return this to clients."""
        return {
            "id": str(self.id),
            "owner_id": self.owner_id,
            "title": self.title,
            "description": self.description,
            "folder_id": str(self.folder_id) if self.folder_id else None,
            "is_locked": self.is_locked,
            "lock_pin_hash": self.lock_pin_hash,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Note":
        return cls(
            id=uuid.UUID(raw["id"]),
            owner_id=raw["owner_id"],
            title=raw["title"],
            description=raw.get("description"),
            folder_id=uuid.UUID(raw["folder_id"]) if raw.get("folder_id") else None,
            is_locked=bool(raw.get("is_locked", False)),
            lock_pin_hash=raw.get("lock_pin_hash"),
            created_at=raw["created_at"],
            updated_at=raw["updated_at"],
            version=int(raw.get("version", 1)),
        )


class NotesStore:
    """JSON-file note persistence, one file per note under ``<base>/notes``.

    Every method that checks a condition and then writes (``update_fields``
    with ``require_unlocked``, ``set_lock``, ``clear_lock``) does both under
    one process-wide lock, so two concurrent requests cannot both pass the
    check. Methods that change rows return the affected count (0 or 1).
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _read(self, note_id: uuid.UUID) -> Optional[dict[str, Any]]:
        path = note_path(self.base_dir, note_id)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def _write(self, raw: dict[str, Any]) -> None:
        atomic_write_json(note_path(self.base_dir, uuid.UUID(raw["id"])), raw)

    def _touch(self, raw: dict[str, Any]) -> None:
        raw["updated_at"] = _next_timestamp(raw["updated_at"])
        raw["version"] = int(raw.get("version", 1)) + 1

    def create(
        self,
        owner_id: str,
        title: str,
        description: Optional[str] = None,
        folder_id: Optional[uuid.UUID] = None,
    ) -> Note:
        now = _utc_now().isoformat()
        note = Note(
            id=uuid.uuid4(),
            owner_id=owner_id,
            title=title,
            description=description,
            folder_id=folder_id,
            is_locked=False,
            lock_pin_hash=None,
            created_at=now,
            updated_at=now,
            version=1,
        )
        self._write(note.to_dict())
        return note

    def get(self, note_id: uuid.UUID) -> Optional[Note]:
        raw = self._read(note_id)
        if raw is None:
            return None
        return Note.from_dict(raw)

    def _scan(self) -> list[Note]:
        root = notes_dir(self.base_dir)
        if not root.exists():
            return []
        out: list[Note] = []
        for p in sorted(root.glob("*.json")):
            out.append(Note.from_dict(json.loads(p.read_text(encoding="utf-8"))))
        out.sort(key=lambda n: n.created_at)
        return out

    def list_by_owner(self, owner_id: str) -> list[Note]:
        return [n for n in self._scan() if n.owner_id == owner_id]

    def list_by_folder(self, folder_id: uuid.UUID) -> list[Note]:
        return [n for n in self._scan() if n.folder_id == folder_id]

    def update_fields(
        self,
        note_id: uuid.UUID,
        partial: dict[str, Any],
        require_unlocked: bool = True,
    ) -> int:
        unknown = set(partial) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")

        with write_lock:
            raw = self._read(note_id)
            if raw is None:
                return 0
            if require_unlocked and raw.get("is_locked"):
                return 0
            for key, value in partial.items():
                if key == "folder_id":
                    value = str(value) if value else None
                raw[key] = value
            self._touch(raw)
            self._write(raw)
            return 1

    def delete(self, note_id: uuid.UUID) -> int:
        with write_lock:
            path = note_path(self.base_dir, note_id)
            if not path.exists():
                return 0
            path.unlink()
            return 1

    def set_lock(self, note_id: uuid.UUID, pin_hash: str) -> int:
        """Lock the note if it is currently unlocked. Returns 0 otherwise."""
        if not pin_hash:
            raise ValueError("pin_hash must not be empty")
        with write_lock:
            raw = self._read(note_id)
            if raw is None or raw.get("is_locked"):
                return 0
            raw["is_locked"] = True
            raw["lock_pin_hash"] = pin_hash
            self._touch(raw)
            self._write(raw)
            return 1

    def clear_lock(self, note_id: uuid.UUID) -> int:
        """Unlock the note and drop its PIN hash. Returns 0 if it was not locked."""
        with write_lock:
            raw = self._read(note_id)
            if raw is None or not raw.get("is_locked"):
                return 0
            raw["is_locked"] = False
            raw["lock_pin_hash"] = None
            self._touch(raw)
            self._write(raw)
            return 1

    def get_pin_hash(self, note_id: uuid.UUID) -> Optional[str]:
        raw = self._read(note_id)
        if raw is None:
            return None
        return raw.get("lock_pin_hash")
