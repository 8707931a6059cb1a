# -*- coding: utf-8 -*-
"""Guided tour: flag endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..security import get_current_user_id, require_admin
from .gate import PersistenceGate, should_start
from .hint_arrow import hint_target
from .models import (
    FlagResetRequest,
    HintResponse,
    Screen,
    ShouldStartResponse,
    TutorialFlagsResponse,
)
from .storage import SQLiteFlagStore

router = APIRouter(prefix="/api/tutorial", tags=["Tutorial"])

_store = SQLiteFlagStore()


def _parse_screen(raw: str) -> Screen:
    try:
        return Screen(raw)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown screen: {raw}") from None


def _flags_response(user_id: str) -> TutorialFlagsResponse:
    flags, updated_at = _store.get_record(user_id)
    return TutorialFlagsResponse(user_id=user_id, flags=flags, updated_at=updated_at)


@router.get("/flags", response_model=TutorialFlagsResponse, summary="Tour completion flags for the current user")
def get_flags(user_id: str = Depends(get_current_user_id)):
    return _flags_response(user_id)


@router.get("/should-start/{screen}", response_model=ShouldStartResponse, summary="Whether a screen's tour should run")
def get_should_start(screen: str, user_id: str = Depends(get_current_user_id)):
    parsed = _parse_screen(screen)
    flags = _store.get_flags(user_id)
    return ShouldStartResponse(screen=parsed, should_start=should_start(parsed, flags))


@router.post(
    "/flags/{screen}/complete",
    response_model=TutorialFlagsResponse,
    summary="Record that a screen's tour finished",
)
async def complete_screen(screen: str, user_id: str = Depends(get_current_user_id)):
    parsed = _parse_screen(screen)
    gate = PersistenceGate(_store, user_id)
    if not await gate.mark_complete(parsed):
        raise HTTPException(status_code=500, detail="Failed to save tutorial progress")
    return _flags_response(user_id)


@router.get("/hint", response_model=HintResponse, summary="Next screen the hint arrow should point to")
def get_hint(
    screen: str = Query(..., description="Screen currently shown"),
    user_id: str = Depends(get_current_user_id),
):
    parsed = _parse_screen(screen)
    return HintResponse(screen=parsed, target=hint_target(parsed, _store.get_flags(user_id)))


@router.post(
    "/reset",
    response_model=TutorialFlagsResponse,
    summary="Clear a user's tour flags (administrative)",
    dependencies=[Depends(require_admin)],
)
async def reset_flags(request: FlagResetRequest):
    gate = PersistenceGate(_store, request.user_id)
    if not await gate.reset(request.screens):
        raise HTTPException(status_code=500, detail="Failed to reset tutorial progress")
    return _flags_response(request.user_id)
