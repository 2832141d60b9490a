import json
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from notevault.storage.files import atomic_write_json, write_lock


def _folders_dir(base_dir: Path) -> Path:
    return base_dir / "folders"


def _folder_path(base_dir: Path, folder_id: uuid.UUID) -> Path:
    return _folders_dir(base_dir) / f"{folder_id}.json"


@dataclass(frozen=True)
class Folder:
    id: uuid.UUID
    owner_id: str
    name: str
    tag: Optional[str]
    notes_amount: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "owner_id": self.owner_id,
            "name": self.name,
            "tag": self.tag,
            "notes_amount": self.notes_amount,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Folder":
        return cls(
            id=uuid.UUID(raw["id"]),
            owner_id=raw["owner_id"],
            name=raw["name"],
            tag=raw.get("tag"),
            notes_amount=int(raw.get("notes_amount", 0)),
        )


class FoldersStore:
    """Folders plus the per-folder note counter (the folder ledger).

    ``notes_amount`` is only ever moved by ``increment``/``decrement``; it is
    never recomputed from the notes. Both are silent for unknown folders and
    ``decrement`` never goes below zero.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _read(self, folder_id: uuid.UUID) -> Optional[dict[str, Any]]:
        p = _folder_path(self.base_dir, folder_id)
        if not p.exists():
            return None
        return json.loads(p.read_text(encoding="utf-8"))

    def create(self, owner_id: str, name: str, tag: Optional[str] = None) -> Folder:
        folder = Folder(id=uuid.uuid4(), owner_id=owner_id, name=name, tag=tag, notes_amount=0)
        atomic_write_json(_folder_path(self.base_dir, folder.id), folder.to_dict())
        return folder

    def get(self, folder_id: uuid.UUID) -> Optional[Folder]:
        raw = self._read(folder_id)
        if raw is None:
            return None
        return Folder.from_dict(raw)

    def list_by_owner(self, owner_id: str) -> list[Folder]:
        folders_dir = _folders_dir(self.base_dir)
        if not folders_dir.exists():
            return []
        out: list[Folder] = []
        for p in sorted(folders_dir.glob("*.json")):
            folder = Folder.from_dict(json.loads(p.read_text(encoding="utf-8")))
            if folder.owner_id == owner_id:
                out.append(folder)
        out.sort(key=lambda f: f.name.lower())
        return out

    def rename(self, folder_id: uuid.UUID, name: Optional[str] = None, tag: Optional[str] = None) -> Optional[Folder]:
        with write_lock:
            raw = self._read(folder_id)
            if raw is None:
                return None
            if name is not None:
                raw["name"] = name
            if tag is not None:
                raw["tag"] = tag
            atomic_write_json(_folder_path(self.base_dir, folder_id), raw)
            return Folder.from_dict(raw)

    def delete(self, folder_id: uuid.UUID) -> int:
        with write_lock:
            p = _folder_path(self.base_dir, folder_id)
            if not p.exists():
                return 0
            p.unlink()
            return 1

    def increment(self, folder_id: uuid.UUID) -> None:
        with write_lock:
            raw = self._read(folder_id)
            if raw is None:
                return
            raw["notes_amount"] = int(raw.get("notes_amount", 0)) + 1
            atomic_write_json(_folder_path(self.base_dir, folder_id), raw)

    def decrement(self, folder_id: uuid.UUID) -> None:
        with write_lock:
            raw = self._read(folder_id)
            if raw is None or int(raw.get("notes_amount", 0)) <= 0:
                return
            raw["notes_amount"] = int(raw["notes_amount"]) - 1
            atomic_write_json(_folder_path(self.base_dir, folder_id), raw)
