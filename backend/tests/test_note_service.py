import uuid

from notevault import config
from notevault.core.outcomes import Ok, Reason


def test_create_in_folder_increments_counter(core):
    folder = core.folders.create(owner_id="owner", name="Work")
    r = core.notes.create("owner", "t", "d", folder_id=folder.id)
    assert isinstance(r, Ok)
    note = r.value
    assert note.owner_id == "owner"
    assert note.is_locked is False
    assert note.lock_pin_hash is None
    assert core.folders.get(folder.id).notes_amount == 1


def test_create_in_unknown_or_foreign_folder(core):
    assert core.notes.create("owner", "t", folder_id=uuid.uuid4()).reason is Reason.NOT_FOUND

    foreign = core.folders.create(owner_id="alice", name="Hers")
    assert core.notes.create("owner", "t", folder_id=foreign.id).reason is Reason.NOT_FOUND
    assert core.folders.get(foreign.id).notes_amount == 0


def test_collaborator_can_update_content(core):
    note = core.notes.create("owner", "t", "d").value
    core.registry.grant(note.id, "alice", "owner")

    r = core.notes.update("alice", note.id, {"title": "new", "description": "changed"})
    assert isinstance(r, Ok)
    assert r.value.title == "new"
    assert r.value.description == "changed"
    assert r.value.version == 2
    assert r.value.updated_at > note.updated_at


def test_stranger_cannot_update(core):
    note = core.notes.create("owner", "t", "d").value
    assert core.notes.update("carol", note.id, {"title": "x"}).reason is Reason.NOT_AUTHORIZED
    assert core.notes_store.get(note.id).title == "t"


def test_update_denied_while_locked(core):
    note = core.notes.create("owner", "t", "d").value
    core.registry.grant(note.id, "alice", "owner")
    core.locks.lock(note.id, "owner", "1234")

    assert core.notes.update("owner", note.id, {"title": "x"}).reason is Reason.NOTE_LOCKED
    assert core.notes.update("alice", note.id, {"description": "x"}).reason is Reason.NOTE_LOCKED
    assert core.notes_store.get(note.id).title == "t"


def test_store_refuses_update_of_locked_note(core):
    # the store re-checks the lock inside its critical section
    note = core.notes.create("owner", "t", "d").value
    core.notes_store.set_lock(note.id, "somehash")
    assert core.notes_store.update_fields(note.id, {"title": "x"}, require_unlocked=True) == 0


def test_move_between_folders(core):
    a = core.folders.create(owner_id="owner", name="A")
    b = core.folders.create(owner_id="owner", name="B")
    note = core.notes.create("owner", "t", folder_id=a.id).value

    r = core.notes.update("owner", note.id, {"folder_id": b.id})
    assert isinstance(r, Ok)
    assert r.value.folder_id == b.id
    assert core.folders.get(a.id).notes_amount == 0
    assert core.folders.get(b.id).notes_amount == 1

    core.notes.update("owner", note.id, {"folder_id": None})
    assert core.notes_store.get(note.id).folder_id is None
    assert core.folders.get(b.id).notes_amount == 0


def test_update_without_folder_change_leaves_counters(core):
    a = core.folders.create(owner_id="owner", name="A")
    note = core.notes.create("owner", "t", folder_id=a.id).value
    core.notes.update("owner", note.id, {"title": "x", "folder_id": a.id})
    assert core.folders.get(a.id).notes_amount == 1


def test_delete_is_owner_only(core):
    note = core.notes.create("owner", "t").value
    core.registry.grant(note.id, "alice", "owner")
    assert core.notes.delete("alice", note.id).reason is Reason.OWNER_ONLY
    assert core.notes.delete("carol", note.id).reason is Reason.NOT_AUTHORIZED
    assert core.notes_store.get(note.id) is not None


def test_delete_cascades_grants_and_counter(core):
    folder = core.folders.create(owner_id="owner", name="F")
    note = core.notes.create("owner", "t", folder_id=folder.id).value
    core.registry.grant(note.id, "alice", "owner")
    core.registry.grant(note.id, "bob", "owner")

    assert isinstance(core.notes.delete("owner", note.id), Ok)
    assert core.notes_store.get(note.id) is None
    assert core.registry.count_live(note.id) == 0
    assert core.registry.list_by_user("alice") == []
    assert core.folders.get(folder.id).notes_amount == 0


def test_failed_delete_keeps_grants(core, monkeypatch):
    note = core.notes.create("owner", "t").value
    core.registry.grant(note.id, "alice", "owner")
    # note file removed by someone else between the guard and the delete
    monkeypatch.setattr(core.notes_store, "delete", lambda note_id: 0)

    assert core.notes.delete("owner", note.id).reason is Reason.NOT_FOUND
    assert core.registry.has_grant(note.id, "alice")


def test_delete_locked_note_without_pin(core):
    note = core.notes.create("owner", "t").value
    core.locks.lock(note.id, "owner", "1234")
    assert isinstance(core.notes.delete("owner", note.id), Ok)
    assert core.notes.get("owner", note.id).reason is Reason.NOT_FOUND


def test_delete_never_drives_counter_negative(core):
    folder = core.folders.create(owner_id="owner", name="F")
    note = core.notes.create("owner", "t", folder_id=folder.id).value
    # simulate a lost increment
    core.folders.decrement(folder.id)
    assert core.folders.get(folder.id).notes_amount == 0

    core.notes.delete("owner", note.id)
    assert core.folders.get(folder.id).notes_amount == 0


def test_list_for_user_marks_collaborations_and_redacts(core):
    own = core.notes.create("alice", "mine", "my text").value
    shared = core.notes.create("owner", "theirs", "hidden text").value
    core.registry.grant(shared.id, "alice", "owner")
    core.locks.lock(shared.id, "owner", "1234")
    core.notes.create("owner", "private", "nope")

    items = core.notes.list_for_user("alice")
    by_id = {i["id"]: i for i in items}
    assert set(by_id) == {str(own.id), str(shared.id)}
    assert by_id[str(own.id)]["is_collaboration"] is False
    assert by_id[str(own.id)]["description"] == "my text"
    assert by_id[str(shared.id)]["is_collaboration"] is True
    assert by_id[str(shared.id)]["description"] == config.LOCKED_PLACEHOLDER
    assert all("lock_pin_hash" not in i for i in items)


def test_list_by_folder_filters_by_access(core):
    folder = core.folders.create(owner_id="owner", name="F")
    visible = core.notes.create("owner", "a", folder_id=folder.id).value
    core.notes.create("owner", "b", folder_id=folder.id)
    core.registry.grant(visible.id, "alice", "owner")

    assert [n["id"] for n in core.notes.list_by_folder("alice", folder.id)] == [str(visible.id)]
    assert len(core.notes.list_by_folder("owner", folder.id)) == 2
    assert core.notes.list_by_folder("carol", folder.id) == []
