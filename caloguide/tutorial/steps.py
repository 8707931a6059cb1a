# -*- coding: utf-8 -*-
"""Guided tour: turning a screen's recipe table into built steps."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Mapping, Optional, Sequence

from ..config import settings
from .geometry import Viewport
from .measure import MeasurableTarget, TargetMeasurer
from .models import Screen, StepDescriptor
from .recipes import BuildContext, Translator
from .screens import SCREEN_STEPS, Recipe
from .strings import catalog_translator

logger = logging.getLogger(__name__)


class StepBuilder:
    """Builds the ordered step list for a screen.

    Recipes run sequentially after a settle delay. A step whose measurement
    fails, or whose copy does not resolve to text, is left out; the remaining
    steps keep their table order. Mode-tagged steps are always kept, since
    mode filtering happens when rendering.
    """

    def __init__(
        self,
        measurer: TargetMeasurer,
        translate: Optional[Translator] = None,
        *,
        viewport: Optional[Viewport] = None,
        settle_delay: Optional[float] = None,
        tables: Optional[Mapping[Screen, Sequence[Recipe]]] = None,
    ) -> None:
        self.measurer = measurer
        self.translate = translate or catalog_translator()
        self.viewport = viewport or Viewport()
        self.settle_delay = settings.build_settle_delay if settle_delay is None else float(settle_delay)
        self.tables = SCREEN_STEPS if tables is None else tables

    async def build(self, screen: Screen, targets: Mapping[str, MeasurableTarget]) -> List[StepDescriptor]:
        recipes = self.tables.get(screen) or ()
        if not recipes:
            return []

        await asyncio.sleep(self.settle_delay)
        ctx = BuildContext(
            screen=screen,
            targets=targets,
            measurer=self.measurer,
            viewport=self.viewport,
            translate=self.translate,
        )
        steps: List[StepDescriptor] = []
        for idx, recipe in enumerate(recipes):
            step = await recipe.derive(ctx)
            if step is None:
                logger.warning("%s: omitting step %d of %d", screen.value, idx + 1, len(recipes))
                continue
            steps.append(step)

        logger.info("%s: built %d of %d steps", screen.value, len(steps), len(recipes))
        return steps
