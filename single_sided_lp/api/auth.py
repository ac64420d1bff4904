from __future__ import annotations

import secrets

from fastapi import Header, HTTPException

from single_sided_lp.shared.config import get_settings


def require_api_token(authorization: str = Header(...)) -> str:
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid token.")
    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise HTTPException(status_code=401, detail="Invalid token.")
    expected = get_settings().api_token
    if expected and not secrets.compare_digest(token, expected):
        raise HTTPException(status_code=401, detail="Invalid token.")
    return token
