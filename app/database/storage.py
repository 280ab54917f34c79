"""
Simple JSON file storage with in-memory caching

- One JSON array per collection (clients, screenings, referrals, ...)
- Records are flat dicts exchanged verbatim with the API
- In-memory cache with TTL reduces file I/O for frequently polled collections
- Easy to migrate to SQL/NoSQL later by replacing these functions
"""
import copy
import json
import uuid
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from app.core.config import DATA_DIR
from app.database.cache import get_collection_cache

# Collection names
CLIENTS = "clients"
SCREENINGS = "screenings"
REFERRALS = "referrals"
RESOURCES = "referral_resources"
PARTNERS = "partner_agencies"
FEEDBACK = "feedback"
INCIDENTS = "incidents"
AUDIT_LOGS = "audit_logs"
OPS_RUNS = "mission_ops_runs"
ORG_CALENDAR_EVENTS = "org_calendar_events"
BOARD_MEETINGS = "board_meetings"
OPPORTUNITIES = "opportunities"
PUBLIC_RSVPS = "public_rsvps"

# Serializes read-modify-write cycles across request threads
_write_lock = Lock()


def read_json(filepath: str) -> List[Dict[str, Any]]:
    """
    Read JSON file, return empty list if not found
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return []


def write_json(filepath: str, data: List[Dict[str, Any]]):
    """
    Write data to JSON file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)


def collection_path(collection: str) -> str:
    return str(Path(DATA_DIR) / f"{collection}.json")


def _load(collection: str) -> List[Dict[str, Any]]:
    """
    Load a collection, serving from cache when fresh
    """
    cache = get_collection_cache()
    cached = cache.get(collection)
    if cached is not None:
        return cached

    records = read_json(collection_path(collection))
    cache.put(collection, records)
    return records


def _store(collection: str, records: List[Dict[str, Any]]):
    write_json(collection_path(collection), records)
    get_collection_cache().put(collection, records)


def list_records(collection: str) -> List[Dict[str, Any]]:
    """
    Get all records in a collection (copies, safe to mutate)
    """
    return copy.deepcopy(_load(collection))


def get_record(collection: str, record_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a single record by id
    """
    for record in _load(collection):
        if record.get('id') == record_id:
            return copy.deepcopy(record)
    return None


def find_records(collection: str, predicate: Optional[Callable[[Dict[str, Any]], bool]] = None,
                 **equals: Any) -> List[Dict[str, Any]]:
    """
    Find records whose fields equal the given values

    Args:
        collection: Collection name
        predicate: Optional extra filter applied after field equality
        **equals: field=value pairs that must all match

    Returns:
        Matching records in storage order
    """
    results = []
    for record in _load(collection):
        if any(record.get(field) != value for field, value in equals.items()):
            continue
        if predicate is not None and not predicate(record):
            continue
        results.append(copy.deepcopy(record))
    return results


def insert_record(collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Append a record, assigning a UUID when it has no id
    """
    record = dict(record)
    if not record.get('id'):
        record['id'] = str(uuid.uuid4())
    with _write_lock:
        records = list(_load(collection))
        records.append(record)
        _store(collection, records)
    return copy.deepcopy(record)


def update_record(collection: str, record_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Shallow-merge updates into an existing record

    Returns the merged record, or None when no record has that id
    """
    with _write_lock:
        records = list(_load(collection))
        for index, record in enumerate(records):
            if record.get('id') == record_id:
                merged = {**record, **updates, 'id': record_id}
                records[index] = merged
                _store(collection, records)
                return copy.deepcopy(merged)
    return None


def increment_field(collection: str, record_id: str, field: str, amount: int = 1) -> Optional[Dict[str, Any]]:
    """
    Add to a numeric counter inside the write lock (missing counters start at 0)
    """
    with _write_lock:
        records = list(_load(collection))
        for index, record in enumerate(records):
            if record.get('id') == record_id:
                merged = {**record, field: (record.get(field) or 0) + amount}
                records[index] = merged
                _store(collection, records)
                return copy.deepcopy(merged)
    return None


def upsert_record(collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge into the record with the same id, or insert it
    """
    record_id = record.get('id')
    if record_id:
        updated = update_record(collection, record_id, record)
        if updated is not None:
            return updated
    return insert_record(collection, record)


def delete_record(collection: str, record_id: str) -> bool:
    """
    Delete a record by id, returns False when it did not exist
    """
    with _write_lock:
        records = list(_load(collection))
        remaining = [r for r in records if r.get('id') != record_id]
        if len(remaining) == len(records):
            return False
        _store(collection, remaining)
    return True


def clear_cache(collection: Optional[str] = None):
    """
    Drop one cached collection, or all of them (next read goes to disk)
    """
    if collection:
        get_collection_cache().drop(collection)
    else:
        get_collection_cache().clear()
