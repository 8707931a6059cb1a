# -*- coding: utf-8 -*-
"""In-memory stand-ins for the collaborators a tour talks to."""

from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from caloguide.tutorial.models import MASTER_FLAG_FIELD, SCREEN_FLAG_FIELDS, Screen, TutorialFlags

Dims = Tuple[float, float, float, float]

UNMOUNTED: Dims = (0.0, 0.0, 0.0, 0.0)


class FakeTarget:
    """Replays canned ``(x, y, w, h)`` answers; the last one repeats."""

    def __init__(self, *answers: Optional[Dims]) -> None:
        self.answers: List[Optional[Dims]] = list(answers) or [UNMOUNTED]
        self.calls = 0

    async def measure_in_window(self):
        self.calls += 1
        if len(self.answers) > 1:
            return self.answers.pop(0)
        return self.answers[0]


class BrokenTarget:
    def __init__(self) -> None:
        self.calls = 0

    async def measure_in_window(self):
        self.calls += 1
        raise RuntimeError("view detached")


class GatedTarget:
    """Blocks until ``release`` is set, like an element whose layout never settles."""

    def __init__(self, dims: Dims) -> None:
        self.dims = dims
        self.release = asyncio.Event()
        self.calls = 0

    async def measure_in_window(self):
        self.calls += 1
        await self.release.wait()
        return self.dims


class FakeScrollView:
    def __init__(self) -> None:
        self.offset = 0.0
        self.calls: List[float] = []

    def scroll_to(self, *, y: float, animated: bool = True) -> None:
        self.calls.append(y)
        self.offset = y


class ScrolledTarget:
    """Element inside a scroll view; its window position moves with the offset."""

    def __init__(self, view: FakeScrollView, dims: Dims) -> None:
        self.view = view
        self.dims = dims
        self.calls = 0

    async def measure_in_window(self):
        self.calls += 1
        x, y, w, h = self.dims
        return (x, y - self.view.offset, w, h)


class MemoryFlagStore:
    def __init__(self, initial: Optional[Mapping[str, TutorialFlags]] = None) -> None:
        self.rows: Dict[str, TutorialFlags] = dict(initial or {})
        self.reads = 0
        self.writes: List[Dict[str, bool]] = []
        self.fail_reads = False
        self.fail_writes = False

    def get_flags(self, user_id: str) -> TutorialFlags:
        self.reads += 1
        if self.fail_reads:
            raise RuntimeError("flag store unreachable")
        return self.rows.get(user_id, TutorialFlags())

    def update_flags(self, user_id: str, updates: Mapping[str, bool]) -> TutorialFlags:
        if self.fail_writes:
            raise RuntimeError("flag store unreachable")
        self.writes.append(dict(updates))
        current = self.rows.get(user_id, TutorialFlags()).model_dump()
        for field, value in updates.items():
            current[field] = current[field] or bool(value)
        self.rows[user_id] = TutorialFlags(**current)
        return self.rows[user_id]

    def reset_flags(self, user_id: str, screens: Optional[Iterable[Screen]] = None) -> TutorialFlags:
        current = self.rows.get(user_id, TutorialFlags()).model_dump()
        for screen in list(SCREEN_FLAG_FIELDS) if screens is None else screens:
            current[SCREEN_FLAG_FIELDS[screen]] = False
        current[MASTER_FLAG_FIELD] = False
        self.rows[user_id] = TutorialFlags(**current)
        return self.rows[user_id]
