"""
HTTP helpers shared by the admin routers.
"""

import os

from fastapi import Header, HTTPException

from nutriveda.errors import NutrivedaException


def verify_admin_key(x_admin_api_key: str = Header(None, alias="X-Admin-API-Key")) -> str:
    """Verify admin API key from header."""
    expected_key = os.environ.get("ADMIN_API_KEY")

    if not expected_key:
        return "dev_mode"

    if not x_admin_api_key:
        raise HTTPException(status_code=401, detail="Missing X-Admin-API-Key header")

    if x_admin_api_key != expected_key:
        raise HTTPException(status_code=401, detail="Invalid admin API key")

    return x_admin_api_key


def to_http_exception(exc: NutrivedaException) -> HTTPException:
    return HTTPException(status_code=exc.http_code, detail=exc.to_dict())
