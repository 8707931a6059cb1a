# -*- coding: utf-8 -*-
"""Guided tour: deciding whether a screen's tour runs, and recording completion."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, Optional

from .models import (
    MASTER_FLAG_FIELD,
    ONBOARDING_ORDER,
    SCREEN_FLAG_FIELDS,
    Screen,
    TutorialFlags,
    is_last_screen,
    upstream_of,
)
from .storage import FlagStore

logger = logging.getLogger(__name__)


def should_start(screen: Screen, flags: TutorialFlags) -> bool:
    """True iff the screen's tour is pending and its upstream tour is done."""
    if flags.is_done(screen):
        return False
    upstream = upstream_of(screen)
    return upstream is None or flags.is_done(upstream)


def completion_update(screen: Screen, flags: TutorialFlags) -> Dict[str, bool]:
    """Fields to write when ``screen``'s tour finishes.

    Finishing the last screen also sets the master flag, provided every other
    screen is already done, so the master flag never outruns the per-screen ones.
    """
    update = {SCREEN_FLAG_FIELDS[screen]: True}
    if is_last_screen(screen) and all(flags.is_done(s) for s in ONBOARDING_ORDER if s != screen):
        update[MASTER_FLAG_FIELD] = True
    return update


class PersistenceGate:
    """Sole writer of a user's tutorial flags.

    Keeps the last confirmed flags in memory; the cache only changes after the
    store confirms a read or write, so a failed write leaves the tour pending
    and it is offered again on the next evaluation.
    """

    def __init__(self, store: FlagStore, user_id: str) -> None:
        self.store = store
        self.user_id = user_id
        self._flags: Optional[TutorialFlags] = None

    @property
    def flags(self) -> Optional[TutorialFlags]:
        return self._flags

    @property
    def tutorial_completed(self) -> bool:
        return bool(self._flags and self._flags.onboarding_done)

    async def refresh(self) -> Optional[TutorialFlags]:
        try:
            flags = await asyncio.to_thread(self.store.get_flags, self.user_id)
        except Exception:
            logger.exception("Failed to read tutorial flags for user %s", self.user_id)
            return None
        self._flags = flags
        return flags

    async def evaluate(self, screen: Screen) -> bool:
        """Fresh point read, then :func:`should_start`. Read failures never start a tour."""
        flags = await self.refresh()
        if flags is None:
            return False
        decision = should_start(screen, flags)
        logger.info("Tour gate for %s (user %s): %s", screen.value, self.user_id, decision)
        return decision

    async def mark_complete(self, screen: Screen) -> bool:
        base = self._flags or await self.refresh()
        if base is None:
            # The master flag is derived from the other screens' flags.
            logger.warning("Not recording %s tour completion for user %s: flags unreadable", screen.value, self.user_id)
            return False
        update = completion_update(screen, base)
        try:
            flags = await asyncio.to_thread(self.store.update_flags, self.user_id, update)
        except Exception:
            logger.exception("Failed to persist %s tour completion for user %s", screen.value, self.user_id)
            return False
        self._flags = flags
        logger.info("Recorded %s tour completion for user %s: %s", screen.value, self.user_id, update)
        return True

    async def reset(self, screens: Optional[Iterable[Screen]] = None) -> bool:
        try:
            flags = await asyncio.to_thread(self.store.reset_flags, self.user_id, screens)
        except Exception:
            logger.exception("Failed to reset tutorial flags for user %s", self.user_id)
            return False
        self._flags = flags
        return True
