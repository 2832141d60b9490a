"""File plumbing shared by the JSON stores.

All stores serialize their read-modify-write sequences on ``write_lock``.
It is one process-wide lock, so a sequence may read one store and write
another (a grant insert that requires the note file to still exist) without
interleaving with a writer of either.
"""

import json
import os
import threading
import uuid
from pathlib import Path
from typing import Any

write_lock = threading.RLock()


def atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


def notes_dir(base_dir: Path) -> Path:
    return base_dir / "notes"


def note_path(base_dir: Path, note_id: uuid.UUID) -> Path:
    return notes_dir(base_dir) / f"{note_id}.json"
