# -*- coding: utf-8 -*-
"""
Guided-tour engine

Gates tours per user and screen, measures their targets, sequences the
steps and records completion.
"""

from .gate import PersistenceGate, completion_update, should_start
from .geometry import Viewport, derive_grid_cells, dim_regions
from .hint_arrow import HintArrow, HintControl, PointerDirection, PointerPlacement, hint_target
from .measure import MeasurableTarget, TargetMeasurer
from .models import ONBOARDING_ORDER, Rect, Screen, StepDescriptor, TutorialFlags
from .overlay import FrameAnimation, RenderFrame, closing_message, render_frame
from .scroll import ScrollCoordinator
from .session import ScreenHost, SessionState, TutorialSession
from .steps import StepBuilder
from .storage import SQLiteFlagStore
from .strings import TUTORIAL_STRINGS_EN, catalog_translator

__all__ = [
    'ONBOARDING_ORDER',
    'FrameAnimation',
    'HintArrow',
    'HintControl',
    'MeasurableTarget',
    'PersistenceGate',
    'PointerDirection',
    'PointerPlacement',
    'Rect',
    'RenderFrame',
    'SQLiteFlagStore',
    'Screen',
    'ScreenHost',
    'ScrollCoordinator',
    'SessionState',
    'StepBuilder',
    'StepDescriptor',
    'TUTORIAL_STRINGS_EN',
    'TargetMeasurer',
    'TutorialFlags',
    'TutorialSession',
    'Viewport',
    'completion_update',
    'catalog_translator',
    'closing_message',
    'derive_grid_cells',
    'dim_regions',
    'hint_target',
    'render_frame',
    'should_start',
]
