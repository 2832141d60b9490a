def test_event_log_emitted_on_create_update_lock(client, tmp_path):
    headers = {"X-User-Id": "userA"}

    r = client.post("/notes", headers=headers, json={"title": "t", "description": "c"})
    assert r.status_code == 201
    note_id = r.json()["id"]

    r = client.put(f"/notes/{note_id}", headers=headers, json={"title": "t2"})
    assert r.status_code == 200

    r = client.post(f"/notes/{note_id}/lock", headers=headers, json={"pin": "zebra-pin"})
    assert r.status_code == 200

    r = client.post(f"/notes/{note_id}/unlock", headers=headers, json={"pin": "zebra-pin"})
    assert r.status_code == 200

    # data/users/userA/events/events.log
    p = tmp_path / "users" / "userA" / "events" / "events.log"
    assert p.exists()

    text = p.read_text(encoding="utf-8")
    assert "NOTE_CREATED" in text
    assert "NOTE_UPDATED" in text
    assert "NOTE_LOCKED" in text
    assert "NOTE_UNLOCKED" in text
    # PIN never reaches the audit trail
    assert "zebra-pin" not in text


def test_event_log_read_back(client):
    import notevault.api.deps as deps

    client.post("/notes", headers={"X-User-Id": "userA"}, json={"title": "t"})
    events = deps.event_log.read("userA")
    assert [e["event_type"] for e in events] == ["NOTE_CREATED"]
    assert deps.event_log.read("nobody") == []
