from __future__ import annotations
from uuid import UUID
from fastapi import Header, HTTPException

async def get_staff_id(x_staff_id: str | None = Header(default=None, alias="X-Staff-Id")) -> UUID | None:
    """Acting staff member, recorded as reviewer/drawer. Authentication happens upstream."""
    if not x_staff_id:
        return None
    try:
        return UUID(x_staff_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="X-Staff-Id must be a UUID")
