import importlib
import os
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

# keep bcrypt cheap in tests; read once when notevault.utils.hashing is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from notevault.core.access import NoteAccessGuard  # noqa: E402
from notevault.core.collaboration import CollaborationRegistry, SharingService  # noqa: E402
from notevault.core.locking import LockStateMachine  # noqa: E402
from notevault.core.notes import NoteService  # noqa: E402
from notevault.storage.collaborators_store import CollaboratorsStore  # noqa: E402
from notevault.storage.folders_store import FoldersStore  # noqa: E402
from notevault.storage.notes_store import NotesStore  # noqa: E402
from notevault.storage.users_store import UsersStore  # noqa: E402


@pytest.fixture()
def core(tmp_path):
    """Stores and services wired against a temp data dir, no HTTP involved."""
    notes_store = NotesStore(tmp_path)
    collaborators_store = CollaboratorsStore(tmp_path)
    folders = FoldersStore(tmp_path)
    users = UsersStore(tmp_path)

    guard = NoteAccessGuard(notes_store, collaborators_store)
    registry = CollaborationRegistry(collaborators_store, notes_store, users)
    ns = SimpleNamespace(
        notes_store=notes_store,
        collaborators_store=collaborators_store,
        folders=folders,
        users=users,
        guard=guard,
        registry=registry,
        locks=LockStateMachine(notes_store, guard),
        sharing=SharingService(guard, registry, notes_store, users),
        notes=NoteService(notes_store, folders, registry, guard),
    )

    for uid in ("owner", "alice", "bob", "carol"):
        users.create(uid, f"{uid}@example.com", uid.capitalize(), "not-a-real-hash")
    return ns


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("JWT_SECRET", "dev-secret-for-tests")
    monkeypatch.setenv("JWT_EXP_MINUTES", "15")

    # reload so that the shared stores pick up the new data dir
    import notevault.config
    import notevault.api.deps
    import notevault.main
    importlib.reload(notevault.config)
    importlib.reload(notevault.api.deps)

    return TestClient(notevault.main.app)


@pytest.fixture()
def register(client):
    def _register(user_id, password="StrongPassw0rd!"):
        r = client.post(
            "/auth/register",
            json={
                "user_id": user_id,
                "email": f"{user_id}@example.com",
                "username": user_id,
                "password": password,
            },
        )
        assert r.status_code == 201
        return r.json()

    return _register
