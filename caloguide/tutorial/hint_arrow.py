# -*- coding: utf-8 -*-
"""Bouncing pointer toward the next screen's entry control."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from ..config import settings
from .measure import MeasurableTarget, TargetMeasurer
from .models import ONBOARDING_ORDER, Rect, Screen, TutorialFlags
from .recipes import Translator
from .strings import catalog_translator

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_KEY = "tutorial.tapToContinue"

# Pointer copy per (current screen, screen to visit next).
HINT_MESSAGE_KEYS: Dict[Tuple[Screen, Screen], str] = {
    (Screen.HOME, Screen.SCANNER): "tutorial.tapToScan",
    (Screen.HOME, Screen.PROFILE): "tutorial.tapToProfile",
    # Profile is reached from the scanner by going back first.
    (Screen.SCANNER, Screen.PROFILE): "tutorial.tapToExit",
}


class PointerDirection(str, Enum):
    DOWN = "down"
    LEFT = "left"


@dataclass(frozen=True)
class HintControl:
    """The control on the current screen that leads to another screen."""

    target: MeasurableTarget
    direction: PointerDirection = PointerDirection.DOWN
    message_key: str = DEFAULT_MESSAGE_KEY

    @classmethod
    def route(
        cls,
        current: Screen,
        destination: Screen,
        target: MeasurableTarget,
        direction: PointerDirection = PointerDirection.DOWN,
    ) -> "HintControl":
        key = HINT_MESSAGE_KEYS.get((current, destination), DEFAULT_MESSAGE_KEY)
        return cls(target, direction, key)


@dataclass(frozen=True)
class PointerPlacement:
    top: float
    left: float
    direction: PointerDirection
    message: Optional[str] = None


def hint_target(current: Screen, flags: TutorialFlags) -> Optional[Screen]:
    """Screen the user should visit next, seen from ``current``.

    Nothing is suggested until the current screen's own tour is done.
    """
    if not flags.is_done(current):
        return None
    for screen in ONBOARDING_ORDER:
        if not flags.is_done(screen):
            return None if screen == current else screen
    return None


def bounce_offset(elapsed: float, amplitude: float = 10.0, leg: float = 0.5) -> float:
    """Pointer displacement: 0 -> -amplitude over one leg, then back."""
    if leg <= 0:
        return 0.0
    phase = elapsed % (2 * leg)
    if phase < leg:
        return -amplitude * phase / leg
    return -amplitude * (2 * leg - phase) / leg


class HintArrow:
    """Screen-local pointer; derives everything from the flags, persists nothing."""

    def __init__(
        self,
        screen: Screen,
        controls: Mapping[Screen, HintControl],
        measurer: TargetMeasurer,
        *,
        settle_delay: Optional[float] = None,
        translate: Optional[Translator] = None,
    ) -> None:
        self.screen = screen
        self.controls = dict(controls)
        self.measurer = measurer
        self.translate = translate or catalog_translator()
        self.settle_delay = settings.hint_settle_delay if settle_delay is None else float(settle_delay)
        self._generation = 0
        self.target_screen: Optional[Screen] = None
        self.rect: Optional[Rect] = None
        self.control: Optional[HintControl] = None

    @property
    def visible(self) -> bool:
        return self.rect is not None

    async def activate(self, target_screen: Screen) -> bool:
        control = self.controls.get(target_screen)
        if control is None:
            logger.info("%s: no control leads to %s", self.screen.value, target_screen.value)
            return False

        self._generation += 1
        generation = self._generation
        await asyncio.sleep(self.settle_delay)
        rect = await self.measurer.measure(control.target)
        if generation != self._generation:
            return False
        if rect is None:
            logger.warning("%s: could not measure the control for %s", self.screen.value, target_screen.value)
            self.deactivate("control not measurable")
            return False

        self.target_screen = target_screen
        self.control = control
        self.rect = rect
        logger.info("%s: pointing at %s", self.screen.value, target_screen.value)
        return True

    async def refresh(self, flags: TutorialFlags) -> bool:
        """Show or hide the pointer for freshly read flags (called on screen focus)."""
        target = hint_target(self.screen, flags)
        if target is None:
            self.deactivate("nothing left to point at")
            return False
        if self.visible and self.target_screen == target:
            return True
        return await self.activate(target)

    def deactivate(self, reason: str = "") -> None:
        self._generation += 1
        if self.visible:
            logger.info("%s: hint hidden (%s)", self.screen.value, reason or "deactivated")
        self.target_screen = None
        self.control = None
        self.rect = None

    def skip(self) -> None:
        self.deactivate("skipped")

    def on_blur(self) -> None:
        self.deactivate("left screen")

    def on_control_used(self, screen: Screen) -> None:
        if screen == self.target_screen:
            self.deactivate("control used")

    def message(self) -> Optional[str]:
        if self.control is None:
            return None
        text = self.translate(self.control.message_key)
        if not isinstance(text, str):
            logger.warning("%s: hint copy %r did not resolve to text", self.screen.value, self.control.message_key)
            return None
        return text

    def placement(self) -> Optional[PointerPlacement]:
        if self.rect is None or self.control is None:
            return None
        rect = self.rect
        if self.control.direction is PointerDirection.LEFT:
            return PointerPlacement(
                top=rect.top + rect.height / 2 - 25,
                left=rect.right + 15,
                direction=PointerDirection.LEFT,
                message=self.message(),
            )
        return PointerPlacement(
            top=rect.top - 80,
            left=rect.center_x - 60,
            direction=PointerDirection.DOWN,
            message=self.message(),
        )
