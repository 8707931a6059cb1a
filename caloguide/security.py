# -*- coding: utf-8 -*-
"""Request identity helpers for FastAPI endpoints."""

from __future__ import annotations

import hmac

from fastapi import HTTPException, Request

from .config import settings

USER_ID_HEADER = "x-user-id"
ADMIN_KEY_HEADER = "x-admin-key"


def get_current_user_id(request: Request) -> str:
    # Unauthenticated: only mount behind a gateway that sets this header from a verified session
    # and strips any client-supplied value. Flags are keyed by it.
    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


def require_admin(request: Request) -> None:
    if not settings.admin_key:
        raise HTTPException(status_code=503, detail="Administrative reset is disabled")
    provided = (request.headers.get(ADMIN_KEY_HEADER) or "").strip()
    if not hmac.compare_digest(provided.encode("utf-8"), settings.admin_key.encode("utf-8")):
        raise HTTPException(status_code=403, detail="Forbidden")
