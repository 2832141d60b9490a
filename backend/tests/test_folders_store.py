import uuid

from notevault.storage.folders_store import FoldersStore


def test_counter_moves_incrementally(tmp_path):
    folders = FoldersStore(tmp_path)
    f = folders.create(owner_id="u", name="Inbox", tag="misc")
    assert f.notes_amount == 0

    folders.increment(f.id)
    folders.increment(f.id)
    folders.decrement(f.id)
    assert folders.get(f.id).notes_amount == 1


def test_decrement_floors_at_zero(tmp_path):
    folders = FoldersStore(tmp_path)
    f = folders.create(owner_id="u", name="Inbox")
    folders.decrement(f.id)
    folders.decrement(f.id)
    assert folders.get(f.id).notes_amount == 0


def test_ledger_ignores_unknown_folder(tmp_path):
    folders = FoldersStore(tmp_path)
    folders.increment(uuid.uuid4())
    folders.decrement(uuid.uuid4())
    assert folders.list_by_owner("u") == []


def test_rename_keeps_counter(tmp_path):
    folders = FoldersStore(tmp_path)
    f = folders.create(owner_id="u", name="Old")
    folders.increment(f.id)
    renamed = folders.rename(f.id, name="New", tag="t")
    assert renamed.name == "New"
    assert renamed.tag == "t"
    assert renamed.notes_amount == 1


def test_list_by_owner_is_scoped(tmp_path):
    folders = FoldersStore(tmp_path)
    folders.create(owner_id="u", name="b")
    folders.create(owner_id="u", name="A")
    folders.create(owner_id="v", name="c")
    assert [f.name for f in folders.list_by_owner("u")] == ["A", "b"]
