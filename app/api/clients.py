"""
Client intake endpoints

Lookup and registration of clients at intake stations, plus the case
record used by referral management.
"""
import logging
import re
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from app.core.roles import INTAKE_ROLES
from app.database import storage as database
from app.database.schemas import Client, ClientInput, ClientUpdate, ClientSearchRequest, Referral
from app.api.utils import get_current_user, require_role
from app.services.audit import record_audit
from app.services.utils import utc_now_iso, client_display_name

logger = logging.getLogger(__name__)

router = APIRouter()


def _digits(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def _full_name(client: dict) -> str:
    return f"{client.get('first_name') or ''} {client.get('last_name') or ''}".strip().lower()


def _matches(client: dict, search: ClientSearchRequest) -> bool:
    if search.phone and _digits(search.phone):
        if _digits(client.get("phone")) == _digits(search.phone):
            return True
    if search.email and search.email.strip():
        if (client.get("email") or "").strip().lower() == search.email.strip().lower():
            return True
    if search.name and search.name.strip():
        needle = search.name.strip().lower()
        preferred = (client.get("preferred_name") or "").lower()
        if needle in _full_name(client) or (preferred and needle in preferred):
            return True
    return False


def _validate_client(payload: dict) -> Client:
    try:
        return Client.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))


@router.post("/clients/search")
async def search_clients(search: ClientSearchRequest, request: Request):
    """
    Find a client by phone, email or name

    One match returns the client, several return {"multiple": true, "results": [...]}.
    """
    actor = get_current_user(request)
    require_role(actor, INTAKE_ROLES)

    has_criteria = any(
        value and value.strip() for value in (search.phone, search.email, search.name)
    )
    if not has_criteria:
        raise HTTPException(status_code=400, detail="Provide a phone, email or name to search")

    results = database.find_records(database.CLIENTS, predicate=lambda c: _matches(c, search))

    if search.shift_id or search.event_id:
        record_audit(
            "CLIENT_SEARCH",
            f"Client search returned {len(results)} result(s)",
            actor,
            shift_id=search.shift_id,
            event_id=search.event_id,
            target_system="clients",
        )

    if not results:
        raise HTTPException(status_code=404, detail="Client not found")
    if len(results) == 1:
        return Client.model_validate(results[0])
    return {"multiple": True, "results": [Client.model_validate(c) for c in results]}


@router.post("/clients/create", response_model=Client)
async def create_client(client: ClientInput, request: Request, shift_id: Optional[str] = None,
                        event_id: Optional[str] = None):
    """
    Register a new client (intake form)
    """
    actor = get_current_user(request)
    require_role(actor, INTAKE_ROLES)

    payload = {
        **client.model_dump(),
        "status": "Active",
        "intake_by": actor.user_id,
        "created_at": utc_now_iso(),
    }
    stored = database.insert_record(database.CLIENTS, _validate_client(payload).model_dump(exclude={"id"}))

    record_audit(
        "CREATE_CLIENT",
        f"Registered client {client_display_name(stored)}",
        actor,
        shift_id=shift_id,
        event_id=event_id,
        target_system="clients",
        target_id=stored["id"],
    )
    logger.info(f"[CLIENTS] Created client {stored['id']}")
    return stored


@router.get("/clients", response_model=List[Client])
async def list_clients(request: Request, q: Optional[str] = None, status: Optional[str] = None):
    """
    List clients, newest first

    q matches name, phone or email
    """
    actor = get_current_user(request)
    require_role(actor, INTAKE_ROLES)

    clients = database.list_records(database.CLIENTS)
    if status:
        clients = [c for c in clients if c.get("status") == status]
    if q and q.strip():
        needle = q.strip().lower()
        needle_digits = _digits(needle)
        clients = [
            c for c in clients
            if needle in _full_name(c)
            or needle in (c.get("email") or "").lower()
            or (needle_digits and needle_digits in _digits(c.get("phone")))
        ]
    clients.sort(key=lambda c: c.get("created_at") or "", reverse=True)
    return clients


@router.get("/clients/{client_id}", response_model=Client)
async def get_client(client_id: str, request: Request):
    actor = get_current_user(request)
    require_role(actor, INTAKE_ROLES)

    client = database.get_record(database.CLIENTS, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.put("/clients/{client_id}", response_model=Client)
async def update_client(client_id: str, updates: ClientUpdate, request: Request):
    """
    Update client record (only provided fields change)
    """
    actor = get_current_user(request)
    require_role(actor, INTAKE_ROLES)

    existing = database.get_record(database.CLIENTS, client_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Client not found")

    changes = updates.model_dump(exclude_unset=True)
    changes["updated_at"] = utc_now_iso()
    merged = _validate_client({**existing, **changes})
    return database.update_record(database.CLIENTS, client_id, merged.model_dump(exclude={"id"}))


@router.get("/clients/{client_id}/referrals", response_model=List[Referral])
async def get_client_referrals(client_id: str, request: Request):
    """
    Referrals for a client, newest first
    """
    actor = get_current_user(request)
    require_role(actor, INTAKE_ROLES)

    if not database.get_record(database.CLIENTS, client_id):
        raise HTTPException(status_code=404, detail="Client not found")

    referrals = database.find_records(database.REFERRALS, client_id=client_id)
    referrals.sort(key=lambda r: r.get("created_at") or "", reverse=True)
    return referrals
