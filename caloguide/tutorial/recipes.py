# -*- coding: utf-8 -*-
"""Guided tour: declarative step recipes.

A recipe names the target(s) a step needs and how to turn their measured
rectangles into a :class:`StepDescriptor`. Three derivations exist:

* :class:`DirectStep` measures a single target.
* :class:`GridStep` measures a grid container plus one reference cell and
  derives the sibling cells arithmetically.
* :class:`StaticStep` skips measurement and lays the target out from the
  viewport, for controls only visible at a programmatically known position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError

from .geometry import ARROW_INSET, BUBBLE_MARGIN, Viewport, derive_grid_cells
from .measure import MeasurableTarget, TargetMeasurer
from .models import Arrow, ArrowDirection, BubblePosition, FrameSequence, Rect, Screen, StepDescriptor

logger = logging.getLogger(__name__)

Translator = Callable[[str], Any]


@dataclass(frozen=True)
class Copy:
    """Translation keys for a step's title and body paragraphs."""

    title: str
    body: Tuple[str, ...]

    @classmethod
    def step(cls, prefix: str, *extra_bodies: str) -> "Copy":
        return cls(
            title=f"{prefix}.title",
            body=(f"{prefix}.content",) + tuple(f"{p}.content" for p in extra_bodies),
        )


class BubbleAnchor(str, Enum):
    ABOVE = "above"
    BELOW = "below"
    FIXED = "fixed"


@dataclass(frozen=True)
class Bubble:
    anchor: BubbleAnchor
    offset: float
    arrow: Optional[ArrowDirection] = None

    @classmethod
    def above(cls, offset: float) -> "Bubble":
        return cls(BubbleAnchor.ABOVE, offset, ArrowDirection.DOWN)

    @classmethod
    def below(cls, offset: float, *, arrow: bool = True) -> "Bubble":
        return cls(BubbleAnchor.BELOW, offset, ArrowDirection.UP if arrow else None)

    @classmethod
    def fixed(cls, top: float, arrow: Optional[ArrowDirection] = None) -> "Bubble":
        return cls(BubbleAnchor.FIXED, top, arrow)

    def place(self, anchor: Rect, pointee: Rect, viewport: Viewport) -> Tuple[BubblePosition, Optional[Arrow]]:
        if self.anchor is BubbleAnchor.ABOVE:
            top = anchor.top - self.offset
        elif self.anchor is BubbleAnchor.BELOW:
            top = anchor.bottom + self.offset
        else:
            top = self.offset
        bubble = BubblePosition(top=top, left=BUBBLE_MARGIN, max_width=viewport.bubble_width)
        arrow = None
        if self.arrow is not None:
            arrow = Arrow(direction=self.arrow, offset=pointee.center_x - ARROW_INSET)
        return bubble, arrow


@dataclass(frozen=True)
class StepOptions:
    images: Optional[FrameSequence] = None
    require_mode: Optional[str] = None
    # Mode the host switches to when the user advances past this step.
    switch_mode_to: Optional[str] = None
    # Scroll so the target sits this far below the viewport top before showing the step.
    scroll_margin: Optional[float] = None


@dataclass
class BuildContext:
    screen: Screen
    targets: Mapping[str, MeasurableTarget]
    measurer: TargetMeasurer
    viewport: Viewport
    translate: Translator

    async def measure(self, name: str) -> Optional[Rect]:
        target = self.targets.get(name)
        if target is None:
            logger.info("%s: target %r is not mounted", self.screen.value, name)
            return None
        rect = await self.measurer.measure(target)
        if rect is None:
            logger.warning("%s: could not measure %r", self.screen.value, name)
        return rect

    def describe(self, copy: Copy, options: StepOptions, **fields: Any) -> Optional[StepDescriptor]:
        title = self.translate(copy.title)
        bodies = [self.translate(key) for key in copy.body]
        if not isinstance(title, str) or not all(isinstance(b, str) for b in bodies):
            logger.warning("%s: non-string copy for %r, dropping step", self.screen.value, copy.title)
            return None
        payload: Dict[str, Any] = dict(fields)
        payload.update(
            title=title,
            body="\n\n".join(bodies),
            images=options.images,
            require_mode=options.require_mode,
            switch_mode_on_advance=options.switch_mode_to is not None,
            switch_to_mode=options.switch_mode_to,
        )
        try:
            return StepDescriptor(**payload)
        except ValidationError as exc:
            logger.warning("%s: invalid step %r: %s", self.screen.value, copy.title, exc)
            return None


@dataclass(frozen=True)
class DirectStep:
    target: str
    copy: Copy
    bubble: Bubble
    padding: float = 0.0
    corner_radius: Optional[float] = None
    # Known top of the target once an earlier step has scrolled the view.
    pin_top: Optional[float] = None
    options: StepOptions = field(default_factory=StepOptions)

    async def derive(self, ctx: BuildContext) -> Optional[StepDescriptor]:
        measured = await ctx.measure(self.target)
        if measured is None:
            return None
        area = measured
        if self.padding:
            area = area.expanded(self.padding, self.corner_radius)
        elif self.corner_radius is not None:
            area = area.model_copy(update={"corner_radius": self.corner_radius})
        if self.pin_top is not None:
            area = area.with_top(self.pin_top)

        bubble, arrow = self.bubble.place(area, area, ctx.viewport)
        scroll_target = None
        remeasure = None
        if self.options.scroll_margin is not None:
            scroll_target = measured.top - self.options.scroll_margin
            remeasure = self.target
        return ctx.describe(
            self.copy,
            self.options,
            target_area=area,
            bubble=bubble,
            arrow=arrow,
            scroll_target=scroll_target,
            remeasure_target=remeasure,
            bubble_follows_target=self.bubble.anchor is not BubbleAnchor.FIXED,
        )


@dataclass(frozen=True)
class GridStep:
    container: str
    reference: str
    copy: Copy
    bubble: Bubble
    # Cell indices to highlight; the first one is the primary target.
    highlight: Tuple[int, ...] = (1, 2, 3)
    columns: int = 2
    gap: float = 12.0
    options: StepOptions = field(default_factory=StepOptions)

    async def derive(self, ctx: BuildContext) -> Optional[StepDescriptor]:
        container = await ctx.measure(self.container)
        if container is None:
            return None
        reference = await ctx.measure(self.reference)
        if reference is None:
            return None

        count = max(self.highlight) + 1 if self.highlight else 0
        cells = derive_grid_cells(container, reference, columns=self.columns, gap=self.gap, count=count)
        picked = [cells[i] for i in self.highlight]
        if not picked:
            return None
        primary, extras = picked[0], tuple(picked[1:])
        bubble, arrow = self.bubble.place(container, primary, ctx.viewport)
        return ctx.describe(
            self.copy,
            self.options,
            target_area=primary,
            extra_highlights=extras,
            bubble=bubble,
            arrow=arrow,
        )


@dataclass(frozen=True)
class StaticStep:
    area: Callable[[Viewport], Rect]
    copy: Copy
    bubble: Bubble
    options: StepOptions = field(default_factory=StepOptions)

    async def derive(self, ctx: BuildContext) -> Optional[StepDescriptor]:
        area = self.area(ctx.viewport)
        bubble, arrow = self.bubble.place(area, area, ctx.viewport)
        return ctx.describe(self.copy, self.options, target_area=area, bubble=bubble, arrow=arrow)
