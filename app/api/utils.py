"""
Utility functions for API endpoints
"""
from typing import List, Optional

from fastapi import Request, HTTPException
from pydantic import BaseModel


class Actor(BaseModel):
    """
    Already-authenticated caller, resolved from request headers
    """
    user_id: str
    role: str = ""
    name: Optional[str] = None
    is_admin: bool = False

    @property
    def display_name(self) -> str:
        return self.name or "Unknown"


def get_current_user(request: Request) -> Actor:
    """
    Extract the acting user from request headers

    Raises HTTPException with 400 status if X-User-ID is missing (not 401,
    authentication happens upstream)
    """
    user_id = request.headers.get('X-User-ID')
    if not user_id:
        raise HTTPException(
            status_code=400,
            detail="Missing X-User-ID header. This header is required for all requests."
        )
    admin_header = (request.headers.get('X-User-Admin') or '').strip().lower()
    return Actor(
        user_id=user_id,
        role=request.headers.get('X-User-Role', ''),
        name=request.headers.get('X-User-Name'),
        is_admin=admin_header in ('true', '1'),
    )


def require_admin(actor: Actor, detail: str = "Admin access required") -> None:
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail=detail)


def require_role(actor: Actor, roles: List[str], detail: Optional[str] = None) -> None:
    """
    Allow admins and any caller whose role is listed

    Raises HTTPException 403 otherwise
    """
    if actor.is_admin or actor.role in roles:
        return
    raise HTTPException(
        status_code=403,
        detail=detail or f"Role '{actor.role or 'none'}' is not allowed to perform this action"
    )
