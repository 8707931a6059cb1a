# -*- coding: utf-8 -*-
"""Scroll helpers for tour steps that live below the fold."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Optional, Protocol

from ..config import settings

logger = logging.getLogger(__name__)


class Scrollable(Protocol):
    def scroll_to(self, *, y: float, animated: bool = True) -> Any:  # pragma: no cover - interface
        ...


class ScrollCoordinator:
    """Issues a scroll and resolves after a fixed wait.

    There is no reliable "scroll finished" signal, so resolution only means
    the view has probably settled; callers re-measure whatever they care
    about instead of trusting the offset.
    """

    def __init__(self, view: Scrollable, *, settle_delay: Optional[float] = None) -> None:
        self.view = view
        self.settle_delay = settings.scroll_settle_delay if settle_delay is None else float(settle_delay)

    async def scroll_to(self, offset: float) -> None:
        offset = max(float(offset), 0.0)
        logger.debug("Scrolling host view to y=%.1f", offset)
        result = self.view.scroll_to(y=offset, animated=True)
        if inspect.isawaitable(result):
            await result
        await asyncio.sleep(self.settle_delay)
