import importlib

from notevault import config
from notevault.core.collaboration import CollaborationRegistry
from notevault.core.locking import LockStateMachine
from notevault.core.outcomes import Ok, Reason


def _reload_with(monkeypatch, **env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    importlib.reload(config)


def _restore(monkeypatch):
    for key in ("MAX_COLLABORATORS", "PIN_MIN_LENGTH"):
        monkeypatch.delenv(key, raising=False)
    importlib.reload(config)


def test_collaborator_cap_ignores_environment(core, monkeypatch):
    _reload_with(monkeypatch, MAX_COLLABORATORS="5")
    try:
        assert config.MAX_COLLABORATORS == 2
        registry = CollaborationRegistry(core.collaborators_store, core.notes_store, core.users)
        note = core.notes_store.create(owner_id="owner", title="t", description="d")

        assert isinstance(registry.grant(note.id, "alice", "owner"), Ok)
        assert isinstance(registry.grant(note.id, "bob", "owner"), Ok)
        r = registry.grant(note.id, "carol", "owner")
        assert r.reason is Reason.COLLABORATOR_LIMIT_EXCEEDED
        assert registry.count_live(note.id) == 2
    finally:
        _restore(monkeypatch)


def test_pin_length_cannot_go_below_four(core, monkeypatch):
    _reload_with(monkeypatch, PIN_MIN_LENGTH="1")
    try:
        assert config.PIN_MIN_LENGTH == 4
        locks = LockStateMachine(core.notes_store, core.guard)
        note = core.notes_store.create(owner_id="owner", title="t", description="d")

        assert locks.lock(note.id, "owner", "1").reason is Reason.PIN_TOO_SHORT
        assert locks.lock(note.id, "owner", "123").reason is Reason.PIN_TOO_SHORT
        assert not core.notes_store.get(note.id).is_locked
    finally:
        _restore(monkeypatch)


def test_explicit_pin_length_is_also_floored(core):
    locks = LockStateMachine(core.notes_store, core.guard, pin_min_length=2)
    assert locks.pin_min_length == 4


def test_pin_length_can_be_raised(core, monkeypatch):
    _reload_with(monkeypatch, PIN_MIN_LENGTH="6")
    try:
        locks = LockStateMachine(core.notes_store, core.guard)
        note = core.notes_store.create(owner_id="owner", title="t", description="d")
        assert locks.lock(note.id, "owner", "12345").reason is Reason.PIN_TOO_SHORT
        assert isinstance(locks.lock(note.id, "owner", "123456"), Ok)
    finally:
        _restore(monkeypatch)
