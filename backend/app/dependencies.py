"""
FastAPI dependencies.
"""

from typing import Optional

from fastapi import Header, HTTPException

from app.database import get_db

__all__ = ["get_db", "get_current_user_id"]


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Resolve the authenticated owner id.

    Authentication happens upstream; the gateway forwards the user id in the
    X-User-Id header. Tests override this dependency or send the header.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id
