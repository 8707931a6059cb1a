# -*- coding: utf-8 -*-
"""Guided tour: Pydantic models and the onboarding order."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Screen(str, Enum):
    HOME = "Home"
    SCANNER = "Scanner"
    PROFILE = "Profile"


# Tours gate one another in this order; the last one sets the master flag.
ONBOARDING_ORDER: Tuple[Screen, ...] = (Screen.HOME, Screen.SCANNER, Screen.PROFILE)


def upstream_of(screen: Screen) -> Optional[Screen]:
    idx = ONBOARDING_ORDER.index(screen)
    return ONBOARDING_ORDER[idx - 1] if idx > 0 else None


def is_last_screen(screen: Screen) -> bool:
    return screen == ONBOARDING_ORDER[-1]


class ArrowDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class Rect(BaseModel):
    """Absolute window rectangle of a highlighted target."""

    model_config = ConfigDict(frozen=True)

    top: float
    left: float
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
    corner_radius: float = Field(16.0, ge=0)

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def expanded(self, pad: float, corner_radius: Optional[float] = None) -> "Rect":
        return Rect(
            top=self.top - pad,
            left=self.left - pad,
            width=self.width + 2 * pad,
            height=self.height + 2 * pad,
            corner_radius=self.corner_radius if corner_radius is None else corner_radius,
        )

    def with_top(self, top: float) -> "Rect":
        return self.model_copy(update={"top": top})


class BubblePosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    top: float
    left: float
    max_width: float = Field(..., gt=0)


class Arrow(BaseModel):
    model_config = ConfigDict(frozen=True)

    direction: ArrowDirection
    offset: float = Field(..., description="Horizontal offset inside the bubble")


class FrameSequence(BaseModel):
    """Ordered illustration frames looped a fixed number of times."""

    model_config = ConfigDict(frozen=True)

    frames: Tuple[str, ...] = Field(..., min_length=1)
    loops: int = Field(3, ge=1)


class StepDescriptor(BaseModel):
    """One built tour step. Immutable; corrections are spliced with model_copy."""

    model_config = ConfigDict(frozen=True)

    target_area: Optional[Rect] = None
    extra_highlights: Tuple[Rect, ...] = ()
    bubble: BubblePosition
    arrow: Optional[Arrow] = None
    title: str = Field(..., min_length=1, strict=True)
    body: str = Field(..., min_length=1, strict=True)
    images: Optional[FrameSequence] = None
    require_mode: Optional[str] = None
    switch_mode_on_advance: bool = False
    switch_to_mode: Optional[str] = None
    scroll_target: Optional[float] = None
    remeasure_target: Optional[str] = None
    # False when the bubble sits at a fixed top regardless of the target.
    bubble_follows_target: bool = False

    @model_validator(mode="after")
    def _check_mode_switch(self) -> "StepDescriptor":
        if self.switch_mode_on_advance and not self.switch_to_mode:
            raise ValueError("switch_to_mode is required when switch_mode_on_advance is set")
        return self

    def relocated(self, area: Rect) -> "StepDescriptor":
        """Move the highlight to a freshly measured ``area``.

        The arrow tracks the target horizontally; the bubble only moves when
        it was placed relative to the target.
        """
        old = self.target_area
        if old is not None:
            area = area.model_copy(update={"corner_radius": old.corner_radius})
        update: Dict[str, object] = {"target_area": area}
        if old is not None:
            if self.bubble_follows_target:
                update["bubble"] = self.bubble.model_copy(update={"top": self.bubble.top + area.top - old.top})
            if self.arrow is not None:
                update["arrow"] = self.arrow.model_copy(
                    update={"offset": self.arrow.offset + area.center_x - old.center_x}
                )
        return self.model_copy(update=update)


class TutorialFlags(BaseModel):
    home_done: bool = False
    scanner_done: bool = False
    profile_done: bool = False
    onboarding_done: bool = Field(False, description="Master flag: every tour finished")

    def is_done(self, screen: Screen) -> bool:
        return bool(getattr(self, SCREEN_FLAG_FIELDS[screen]))


SCREEN_FLAG_FIELDS: Dict[Screen, str] = {
    Screen.HOME: "home_done",
    Screen.SCANNER: "scanner_done",
    Screen.PROFILE: "profile_done",
}
MASTER_FLAG_FIELD = "onboarding_done"


# ---- API payloads ----


class TutorialFlagsResponse(BaseModel):
    user_id: str
    flags: TutorialFlags
    updated_at: Optional[str] = None


class ShouldStartResponse(BaseModel):
    screen: Screen
    should_start: bool


class HintResponse(BaseModel):
    screen: Screen
    target: Optional[Screen] = None


class FlagResetRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=128)
    screens: Optional[List[Screen]] = Field(
        default=None, description="Screens to clear; all of them when omitted"
    )
