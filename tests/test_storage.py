"""
JSON document store: collection files, cache and record operations
"""
import json
from pathlib import Path

from app.database import storage
from app.database.cache import CollectionCache, get_collection_cache


def test_insert_creates_collection_file(temp_data_dir):
    record = storage.insert_record(storage.CLIENTS, {"first_name": "Ana"})
    assert record["id"]

    path = Path(temp_data_dir) / "clients.json"
    assert path.exists()
    with open(path, 'r') as f:
        saved = json.load(f)
    assert saved == [record]


def test_missing_or_corrupt_file_reads_as_empty(temp_data_dir):
    assert storage.list_records(storage.REFERRALS) == []

    path = Path(temp_data_dir) / "incidents.json"
    path.write_text("{not json")
    assert storage.read_json(str(path)) == []


def test_update_merges_and_keeps_id(temp_data_dir):
    record = storage.insert_record(storage.CLIENTS, {"first_name": "Ana", "status": "Active"})
    updated = storage.update_record(storage.CLIENTS, record["id"], {"status": "Closed", "id": "other"})
    assert updated == {"id": record["id"], "first_name": "Ana", "status": "Closed"}
    assert storage.update_record(storage.CLIENTS, "missing", {"status": "Closed"}) is None


def test_find_records_by_field_and_predicate(temp_data_dir):
    storage.insert_record(storage.SCREENINGS, {"event_id": "ev1", "follow_up_needed": True})
    storage.insert_record(storage.SCREENINGS, {"event_id": "ev1", "follow_up_needed": False})
    storage.insert_record(storage.SCREENINGS, {"event_id": "ev2", "follow_up_needed": True})

    assert len(storage.find_records(storage.SCREENINGS, event_id="ev1")) == 2
    flagged = storage.find_records(storage.SCREENINGS, lambda s: s["follow_up_needed"], event_id="ev1")
    assert len(flagged) == 1


def test_returned_records_are_copies(temp_data_dir):
    record = storage.insert_record(storage.CLIENTS, {"needs": {"food": True}})
    fetched = storage.get_record(storage.CLIENTS, record["id"])
    fetched["needs"]["food"] = False
    assert storage.get_record(storage.CLIENTS, record["id"])["needs"]["food"] is True


def test_upsert_delete_and_increment(temp_data_dir):
    storage.upsert_record(storage.OPS_RUNS, {"id": "shift1_u1", "completed_items": []})
    storage.upsert_record(storage.OPS_RUNS, {"id": "shift1_u1", "completed_items": ["a"]})
    assert storage.list_records(storage.OPS_RUNS) == [{"id": "shift1_u1", "completed_items": ["a"]}]

    event = storage.insert_record(storage.OPPORTUNITIES, {"title": "Fair"})
    assert storage.increment_field(storage.OPPORTUNITIES, event["id"], "rsvp_count", 3)["rsvp_count"] == 3
    assert storage.increment_field(storage.OPPORTUNITIES, event["id"], "rsvp_count")["rsvp_count"] == 4

    assert storage.delete_record(storage.OPS_RUNS, "shift1_u1") is True
    assert storage.delete_record(storage.OPS_RUNS, "shift1_u1") is False


def test_writes_refresh_cache(temp_data_dir):
    storage.list_records(storage.FEEDBACK)  # warm the cache with an empty list
    storage.insert_record(storage.FEEDBACK, {"rating": 5})
    assert len(storage.list_records(storage.FEEDBACK)) == 1


def test_cache_serves_repeat_reads_until_dropped(temp_data_dir):
    cache = get_collection_cache()
    storage.insert_record(storage.CLIENTS, {"first_name": "Ana"})
    storage.list_records(storage.CLIENTS)
    assert cache.stats()["hits"] == 1

    # Edit the file behind the store's back; the cached list still wins
    path = Path(temp_data_dir) / "clients.json"
    path.write_text("[]")
    assert len(storage.list_records(storage.CLIENTS)) == 1

    storage.clear_cache(storage.CLIENTS)
    assert storage.list_records(storage.CLIENTS) == []
    assert cache.stats()["misses"] == 2


def test_expired_entries_are_reloaded(temp_data_dir):
    cache = CollectionCache(ttl_seconds=0)
    cache.put("clients", [{"id": "1"}])
    assert cache.get("clients") is None
    assert cache.stats() == {"collections": 0, "hits": 0, "misses": 1}
