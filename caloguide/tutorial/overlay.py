# -*- coding: utf-8 -*-
"""What the overlay draws for the current frame."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import settings
from .geometry import Viewport, dim_regions
from .models import Rect, Screen, StepDescriptor, is_last_screen
from .recipes import Translator
from .session import TutorialSession

logger = logging.getLogger(__name__)

_LABEL_KEYS = ("tutorial.skip", "tutorial.next", "tutorial.finish")


@dataclass(frozen=True)
class RenderFrame:
    step: StepDescriptor
    index: int
    total: int
    primary_label: str
    skip_label: str
    dim: Tuple[Rect, ...]
    animation: Optional["FrameAnimation"] = None


def render_frame(
    session: TutorialSession,
    mode: Optional[str],
    translate: Translator,
    viewport: Optional[Viewport] = None,
) -> Optional[RenderFrame]:
    """Frame for the session's current step, or ``None`` when nothing should be drawn.

    Latent steps (mode mismatch) and steps or labels that did not resolve to
    text draw nothing; bad content is logged, never raised.
    """
    step = session.visible_step(mode)
    if step is None:
        return None
    if not isinstance(step.title, str) or not isinstance(step.body, str):
        logger.error("Step %d has non-text content, not drawing it", session.cursor)
        return None

    skip_label, next_label, finish_label = (translate(key) for key in _LABEL_KEYS)
    if not all(isinstance(label, str) for label in (skip_label, next_label, finish_label)):
        logger.error("Tour button labels did not resolve to text, not drawing step %d", session.cursor)
        return None

    viewport = viewport or Viewport()
    dim = tuple(dim_regions(step.target_area, viewport)) if step.target_area is not None else ()
    return RenderFrame(
        step=step,
        index=session.cursor,
        total=len(session.steps),
        primary_label=finish_label if session.is_last_step else next_label,
        skip_label=skip_label,
        dim=dim,
        animation=FrameAnimation.for_step(step),
    )


def closing_message(screen: Screen, translate: Translator) -> Optional[str]:
    """Thank-you shown after the final onboarding tour; other screens close silently."""
    if not is_last_screen(screen):
        return None
    message = translate("tutorial.thankYou")
    return message if isinstance(message, str) else None


class FrameAnimation:
    """Cycles a step's illustration frames ``loops`` times, then rests on the first frame."""

    def __init__(self, frame_count: int, loops: int = 3, interval: Optional[float] = None) -> None:
        if frame_count < 1:
            raise ValueError("frame_count must be >= 1")
        self.frame_count = frame_count
        self.loops = max(int(loops), 1)
        self.interval = settings.frame_interval if interval is None else float(interval)

    @classmethod
    def for_step(cls, step: StepDescriptor, interval: Optional[float] = None) -> Optional["FrameAnimation"]:
        if step.images is None:
            return None
        return cls(len(step.images.frames), step.images.loops, interval)

    @property
    def total_ticks(self) -> int:
        return self.frame_count * self.loops

    def ticks_at(self, elapsed: float) -> int:
        if elapsed <= 0 or self.interval <= 0:
            return 0
        return int(elapsed // self.interval)

    def running(self, ticks: int) -> bool:
        return ticks < self.total_ticks

    def frame_at(self, ticks: int) -> int:
        if not self.running(ticks):
            return 0
        return ticks % self.frame_count
