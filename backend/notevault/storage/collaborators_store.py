import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from notevault.storage.files import atomic_write_json, note_path, write_lock


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _grants_dir(base_dir: Path) -> Path:
    # data/collaborators/<note_id>.json holds the ordered grant list of one note
    return base_dir / "collaborators"


def _grants_path(base_dir: Path, note_id: uuid.UUID) -> Path:
    return _grants_dir(base_dir) / f"{note_id}.json"


@dataclass(frozen=True)
class Grant:
    grant_id: uuid.UUID
    note_id: uuid.UUID
    user_id: str
    added_by: str
    role: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "grant_id": str(self.grant_id),
            "note_id": str(self.note_id),
            "user_id": self.user_id,
            "added_by": self.added_by,
            "role": self.role,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Grant":
        return cls(
            grant_id=uuid.UUID(raw["grant_id"]),
            note_id=uuid.UUID(raw["note_id"]),
            user_id=raw["user_id"],
            added_by=raw["added_by"],
            role=raw["role"],
            created_at=raw["created_at"],
        )


class CollaboratorsStore:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _load(self, note_id: uuid.UUID) -> list[dict[str, Any]]:
        p = _grants_path(self.base_dir, note_id)
        if not p.exists():
            return []
        return json.loads(p.read_text(encoding="utf-8"))["grants"]

    def _save(self, note_id: uuid.UUID, grants: list[dict[str, Any]]) -> None:
        p = _grants_path(self.base_dir, note_id)
        if not grants:
            if p.exists():
                p.unlink()
            return
        atomic_write_json(p, {"note_id": str(note_id), "grants": grants})

    def add_if_room(
        self,
        note_id: uuid.UUID,
        user_id: str,
        added_by: str,
        role: str,
        limit: int,
    ) -> tuple[Optional[Grant], str]:
        """Insert a grant unless the user already holds one or the note is full.

        The duplicate check, the cap check and the insert happen under one
        lock, together with a check that the note itself still exists. Returns
        ``(grant, "ok")``, ``(None, "missing")``, ``(None, "duplicate")`` or
        ``(None, "full")``.
        """
        with write_lock:
            if not note_path(self.base_dir, note_id).exists():
                return None, "missing"
            grants = self._load(note_id)
            if any(g["user_id"] == user_id for g in grants):
                return None, "duplicate"
            if len(grants) >= limit:
                return None, "full"

            grant = Grant(
                grant_id=uuid.uuid4(),
                note_id=note_id,
                user_id=user_id,
                added_by=added_by,
                role=role,
                created_at=_utc_now_iso(),
            )
            grants.append(grant.to_dict())
            self._save(note_id, grants)
            return grant, "ok"

    def remove(self, note_id: uuid.UUID, user_id: str) -> int:
        with write_lock:
            grants = self._load(note_id)
            kept = [g for g in grants if g["user_id"] != user_id]
            if len(kept) == len(grants):
                return 0
            self._save(note_id, kept)
            return len(grants) - len(kept)

    def remove_all(self, note_id: uuid.UUID) -> int:
        with write_lock:
            grants = self._load(note_id)
            self._save(note_id, [])
            return len(grants)

    def find_by_note(self, note_id: uuid.UUID) -> list[Grant]:
        return [Grant.from_dict(g) for g in self._load(note_id)]

    def find(self, note_id: uuid.UUID, user_id: str) -> Optional[Grant]:
        for g in self._load(note_id):
            if g["user_id"] == user_id:
                return Grant.from_dict(g)
        return None

    def find_by_user(self, user_id: str) -> list[Grant]:
        """
        Grants are stored per note, so we scan every grant file for the user.
        Fine for a JSON-file store; a real database would index user_id.
        """
        grants_dir = _grants_dir(self.base_dir)
        if not grants_dir.exists():
            return []

        out: list[Grant] = []
        for p in sorted(grants_dir.glob("*.json")):
            raw = json.loads(p.read_text(encoding="utf-8"))
            for g in raw["grants"]:
                if g["user_id"] == user_id:
                    out.append(Grant.from_dict(g))
        out.sort(key=lambda g: g.created_at)
        return out

    def count(self, note_id: uuid.UUID) -> int:
        return len(self._load(note_id))
