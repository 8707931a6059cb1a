# -*- coding: utf-8 -*-
"""Guided tour: per-screen session state machine.

Idle -> Building -> Active -> Finished -> Idle. Every suspension point
(gate read, build, mode settle, scroll settle, re-measurement) runs as a
tracked task tagged with the session generation; blur, cancel and skip bump
the generation so continuations from an abandoned tour are discarded instead
of mutating a session that has moved on.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..config import settings
from .gate import PersistenceGate
from .measure import MeasurableTarget, TargetMeasurer
from .models import Screen, StepDescriptor
from .scroll import ScrollCoordinator
from .steps import StepBuilder

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    BUILDING = "building"
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass
class ScreenHost:
    """What a hosting screen lends to its tour."""

    screen: Screen
    targets: Dict[str, MeasurableTarget] = field(default_factory=dict)
    scroller: Optional[ScrollCoordinator] = None
    set_mode: Optional[Callable[[str], Any]] = None
    on_complete: Optional[Callable[[Screen], Any]] = None


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class TutorialSession:
    def __init__(
        self,
        host: ScreenHost,
        gate: PersistenceGate,
        builder: StepBuilder,
        *,
        measurer: Optional[TargetMeasurer] = None,
        mode_settle_delay: Optional[float] = None,
    ) -> None:
        self.host = host
        self._gate = gate
        self._builder = builder
        self._measurer = measurer or builder.measurer
        self.mode_settle_delay = settings.mode_settle_delay if mode_settle_delay is None else float(mode_settle_delay)

        self._state = SessionState.IDLE
        self._screen: Optional[Screen] = None
        self._steps: List[StepDescriptor] = []
        self._cursor = 0
        self._generation = 0
        self._pending: Optional[asyncio.Future] = None
        self._starting = False
        self._advancing = False

    # ---- read-only view ----

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def screen(self) -> Optional[Screen]:
        return self._screen

    @property
    def steps(self) -> Tuple[StepDescriptor, ...]:
        return tuple(self._steps)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current_step(self) -> Optional[StepDescriptor]:
        if self._state is not SessionState.ACTIVE or self._cursor >= len(self._steps):
            return None
        return self._steps[self._cursor]

    @property
    def is_last_step(self) -> bool:
        return bool(self._steps) and self._cursor == len(self._steps) - 1

    def visible_step(self, mode: Optional[str] = None) -> Optional[StepDescriptor]:
        """The step to draw for the host's current mode; latent steps draw nothing."""
        step = self.current_step
        if step is None:
            return None
        if step.require_mode is not None and step.require_mode != mode:
            return None
        return step

    # ---- transitions ----

    async def start(self) -> bool:
        if self._state is not SessionState.IDLE or self._starting:
            logger.debug("%s: tour already %s, ignoring start", self.host.screen.value, self._state.value)
            return False

        self._starting = True
        generation = self._generation
        screen = self.host.screen
        try:
            ok, approved = await self._guarded(self._gate.evaluate(screen))
            if not ok or not approved:
                return False

            self._state = SessionState.BUILDING
            self._screen = screen
            ok, steps = await self._guarded(self._builder.build(screen, self.host.targets))
            if not ok:
                return False
            if not steps:
                logger.info("%s: nothing measurable, no tour to run", screen.value)
                self._reset()
                return False

            self._steps = list(steps)
            self._cursor = 0
            if self._steps[0].scroll_target is not None and self.host.scroller is not None:
                if not await self._scroll_into_view(0):
                    return False
            self._state = SessionState.ACTIVE
            logger.info("%s: tour started with %d steps", screen.value, len(self._steps))
            return True
        except Exception:
            logger.exception("%s: tour build failed", screen.value)
            if self._generation == generation:
                self._reset()
            return False
        finally:
            if self._generation == generation:
                self._starting = False

    async def advance(self) -> None:
        if self._state is not SessionState.ACTIVE or self._advancing:
            return

        self._advancing = True
        generation = self._generation
        try:
            step = self._steps[self._cursor]
            if step.switch_mode_on_advance:
                await self._switch_mode(step.switch_to_mode)
                if self._generation != generation:
                    return
                ok, _ = await self._guarded(asyncio.sleep(self.mode_settle_delay))
                if not ok:
                    return
                if self._cursor < len(self._steps) - 1:
                    self._cursor += 1
                else:
                    await self._finish()
                return

            nxt = self._cursor + 1
            if nxt >= len(self._steps):
                await self._finish()
                return
            if self._steps[nxt].scroll_target is not None:
                if self.host.scroller is None:
                    logger.debug("%s: no scroll view, showing step %d in place", self.host.screen.value, nxt)
                elif not await self._scroll_into_view(nxt):
                    return
            self._cursor = nxt
        finally:
            if self._generation == generation:
                self._advancing = False

    async def skip(self) -> None:
        if self._state is not SessionState.ACTIVE:
            return
        logger.info("%s: tour skipped at step %d", self.host.screen.value, self._cursor)
        self._invalidate()
        await self._finish()

    def cancel(self) -> None:
        """Abandon the tour without recording anything."""
        if self._state is SessionState.IDLE and not self._starting:
            return
        logger.info("%s: tour abandoned while %s", self.host.screen.value, self._state.value)
        self._invalidate()
        self._reset()

    def on_blur(self, screen: Optional[Screen] = None) -> None:
        if screen is None or screen == self.host.screen:
            self.cancel()

    async def on_focus(self) -> bool:
        """Re-evaluate from scratch; flags may have changed while the screen was away."""
        if self._state is not SessionState.IDLE:
            return self._state is SessionState.ACTIVE
        return await self.start()

    # ---- internals ----

    async def _guarded(self, aw: Awaitable[Any]) -> Tuple[bool, Any]:
        """Await ``aw`` as a tracked task; ``(False, None)`` if the session moved on meanwhile."""
        generation = self._generation
        task = asyncio.ensure_future(aw)
        self._pending = task
        try:
            result = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                return False, None
            raise
        finally:
            if self._pending is task:
                self._pending = None
        if generation != self._generation:
            return False, None
        return True, result

    def _invalidate(self) -> None:
        self._generation += 1
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()

    def _reset(self) -> None:
        self._state = SessionState.IDLE
        self._screen = None
        self._steps = []
        self._cursor = 0
        self._starting = False
        self._advancing = False

    async def _switch_mode(self, mode: Optional[str]) -> None:
        if self.host.set_mode is None:
            logger.warning("%s: step wants mode %r but the screen has no mode setter", self.host.screen.value, mode)
            return
        try:
            await _maybe_await(self.host.set_mode(mode))
        except Exception:
            logger.exception("%s: switching to mode %r failed", self.host.screen.value, mode)

    async def _scroll_into_view(self, index: int) -> bool:
        step = self._steps[index]
        ok, _ = await self._guarded(self.host.scroller.scroll_to(step.scroll_target))
        if not ok:
            return False
        if step.remeasure_target is None:
            return True

        target = self.host.targets.get(step.remeasure_target)
        ok, rect = await self._guarded(self._measurer.measure(target))
        if not ok:
            return False
        if rect is None:
            logger.warning(
                "%s: %r not measurable after scrolling, keeping its built position",
                self.host.screen.value,
                step.remeasure_target,
            )
        else:
            self._steps[index] = step.relocated(rect)
        return True

    async def _finish(self) -> None:
        screen = self._screen or self.host.screen
        self._state = SessionState.FINISHED
        self._cursor = len(self._steps)

        if not await self._gate.mark_complete(screen):
            logger.warning("%s: completion not saved; the tour will be offered again", screen.value)
        self._reset()
        logger.info("%s: tour finished", screen.value)

        if self.host.on_complete is not None:
            try:
                await _maybe_await(self.host.on_complete(screen))
            except Exception:
                logger.exception("%s: completion callback failed", screen.value)
