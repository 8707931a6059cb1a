# -*- coding: utf-8 -*-
"""Per-screen step tables, in the order the steps are shown."""

from __future__ import annotations

from typing import Dict, Tuple, Union

from .geometry import Viewport
from .models import ArrowDirection, FrameSequence, Rect, Screen
from .recipes import Bubble, Copy, DirectStep, GridStep, StaticStep, StepOptions

Recipe = Union[DirectStep, GridStep, StaticStep]

BARCODE_MODE = "barcode"
PHOTO_MODE = "photo"

# Scanner bottom controls: padding below the capture button and its size.
_CAPTURE_BOTTOM_PADDING = 50.0
_CAPTURE_SIZE = 80.0


def capture_button_area(viewport: Viewport) -> Rect:
    """Capture button rectangle, laid out from the camera screen's fixed controls."""
    button_top = viewport.height - _CAPTURE_BOTTOM_PADDING - _CAPTURE_SIZE - 7
    return Rect(
        top=button_top - _CAPTURE_SIZE / 2,
        left=viewport.width / 2 - _CAPTURE_SIZE / 2,
        width=_CAPTURE_SIZE,
        height=_CAPTURE_SIZE,
        corner_radius=_CAPTURE_SIZE / 2,
    )


HOME_STEPS: Tuple[Recipe, ...] = (
    DirectStep(
        target="caloriesCard",
        copy=Copy.step("tutorial.home.step1"),
        bubble=Bubble.above(210),
    ),
    GridStep(
        container="macroCards",
        reference="caloriesCard",
        copy=Copy.step("tutorial.home.step2"),
        bubble=Bubble.above(220),
        highlight=(1, 2, 3),
    ),
    DirectStep(
        target="mealsList",
        copy=Copy.step("tutorial.home.step3"),
        bubble=Bubble.fixed(160, ArrowDirection.DOWN),
        options=StepOptions(scroll_margin=200),
    ),
    DirectStep(
        target="scannerButton",
        copy=Copy.step("tutorial.home.step4"),
        bubble=Bubble.above(230),
    ),
)

SCANNER_STEPS: Tuple[Recipe, ...] = (
    DirectStep(
        target="title",
        copy=Copy.step("tutorial.scanner.step1"),
        bubble=Bubble.below(40, arrow=False),
        padding=20,
        corner_radius=12,
        options=StepOptions(
            images=FrameSequence(
                frames=("scanner_demo_1.png", "scanner_demo_2.png", "scanner_demo_3.png"),
                loops=3,
            ),
            require_mode=BARCODE_MODE,
        ),
    ),
    DirectStep(
        target="modeToggle",
        copy=Copy.step("tutorial.scanner.step2"),
        bubble=Bubble.below(20),
        options=StepOptions(require_mode=BARCODE_MODE, switch_mode_to=PHOTO_MODE),
    ),
    StaticStep(
        area=capture_button_area,
        copy=Copy.step("tutorial.scanner.step3", "tutorial.scanner.step4"),
        bubble=Bubble.fixed(80, ArrowDirection.DOWN),
        options=StepOptions(
            images=FrameSequence(
                frames=(
                    "camera_demo_1.png",
                    "camera_demo_2.png",
                    "camera_demo_3.png",
                    "camera_demo_4.png",
                ),
                loops=3,
            ),
        ),
    ),
)

PROFILE_STEPS: Tuple[Recipe, ...] = (
    DirectStep(
        target="statsGrid",
        copy=Copy.step("tutorial.profile.step1"),
        bubble=Bubble.above(180),
    ),
    DirectStep(
        target="editButton",
        copy=Copy.step("tutorial.profile.step2"),
        bubble=Bubble.below(20),
    ),
    DirectStep(
        target="goalsButton",
        copy=Copy.step("tutorial.profile.step3"),
        bubble=Bubble.below(20),
        pin_top=200,
        options=StepOptions(scroll_margin=200),
    ),
    # Dietary and display rows sit at known offsets once the goals step has scrolled.
    DirectStep(
        target="dietaryButton",
        copy=Copy.step("tutorial.profile.step4"),
        bubble=Bubble.fixed(40, ArrowDirection.DOWN),
        pin_top=280,
    ),
    DirectStep(
        target="displaySettingsButton",
        copy=Copy.step("tutorial.profile.step5"),
        bubble=Bubble.fixed(100, ArrowDirection.DOWN),
        pin_top=358,
    ),
)

SCREEN_STEPS: Dict[Screen, Tuple[Recipe, ...]] = {
    Screen.HOME: HOME_STEPS,
    Screen.SCANNER: SCANNER_STEPS,
    Screen.PROFILE: PROFILE_STEPS,
}
