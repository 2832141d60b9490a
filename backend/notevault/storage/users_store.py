from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from notevault.storage.files import atomic_write_json, write_lock


def is_valid_user_id(user_id: str) -> bool:
    # user ids name directories, so no separators or traversal
    return bool(user_id) and not any(ch in user_id for ch in ["/", "\\"]) and ".." not in user_id


def _safe_user_dir(base_dir: Path, user_id: str) -> Path:
    if not is_valid_user_id(user_id):
        raise ValueError("Invalid user_id")
    return base_dir / "users" / user_id


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class UserRecord:
    user_id: str
    email: str
    username: str
    hashed_password: str
    created_at: str

    def public_dict(self) -> dict:
        return {"user_id": self.user_id, "email": self.email, "username": self.username}


class UsersStore:
    """Identity directory backed by ``<base>/users/<user_id>/user.json``."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _user_path(self, user_id: str) -> Path:
        return _safe_user_dir(self.base_dir, user_id) / "user.json"

    def get(self, user_id: str) -> Optional[UserRecord]:
        try:
            p = self._user_path(user_id)
        except ValueError:
            return None
        if not p.exists():
            return None
        raw = json.loads(p.read_text(encoding="utf-8"))
        return UserRecord(**raw)

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        users_dir = self.base_dir / "users"
        if not users_dir.exists():
            return None

        wanted = _normalize_email(email)
        for user_dir in sorted(users_dir.iterdir()):
            p = user_dir / "user.json"
            if not p.exists():
                continue
            raw = json.loads(p.read_text(encoding="utf-8"))
            if raw.get("email") == wanted:
                return UserRecord(**raw)
        return None

    def create(self, user_id: str, email: str, username: str, hashed_password: str) -> UserRecord:
        with write_lock:
            p = self._user_path(user_id)
            if p.exists():
                raise FileExistsError("User exists")
            if self.find_by_email(email) is not None:
                raise FileExistsError("Email already registered")

            rec = UserRecord(
                user_id=user_id,
                email=_normalize_email(email),
                username=username,
                hashed_password=hashed_password,
                created_at=datetime.now(timezone.utc).isoformat(),
            )
            atomic_write_json(p, rec.__dict__)
            return rec
