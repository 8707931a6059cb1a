# -*- coding: utf-8 -*-
"""Measuring UI targets once their layout has settled."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol, Tuple

from ..config import settings
from .models import Rect

logger = logging.getLogger(__name__)


class MeasurableTarget(Protocol):
    """A rendered element that can report its absolute window rectangle.

    ``measure_in_window`` returns ``(x, y, width, height)`` (or an object with
    those attributes). Before the element is mounted it reports a zero-sized
    rectangle or ``None`` rather than raising.
    """

    async def measure_in_window(self) -> Any:  # pragma: no cover - interface
        ...


def _unpack(raw: Any) -> Optional[Tuple[float, float, float, float]]:
    if raw is None:
        return None
    if isinstance(raw, (tuple, list)) and len(raw) == 4:
        x, y, w, h = raw
    else:
        try:
            x, y, w, h = raw.x, raw.y, raw.width, raw.height
        except AttributeError:
            return None
    return float(x or 0.0), float(y or 0.0), float(w or 0.0), float(h or 0.0)


class TargetMeasurer:
    """Polls a target with bounded retries until it reports a usable rectangle."""

    def __init__(
        self,
        *,
        top_inset: float = 0.0,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        corner_radius: float = 16.0,
    ) -> None:
        self.top_inset = float(top_inset)
        self.max_retries = settings.measure_retries if max_retries is None else int(max_retries)
        self.retry_delay = settings.measure_retry_delay if retry_delay is None else float(retry_delay)
        self.corner_radius = corner_radius

    async def measure(self, target: Optional[MeasurableTarget], max_retries: Optional[int] = None) -> Optional[Rect]:
        """Return the target's rectangle, or ``None`` when it never settles.

        Never raises for a missing or misbehaving target; cancellation still
        propagates.
        """
        if target is None:
            return None
        retries = self.max_retries if max_retries is None else max(int(max_retries), 0)

        for attempt in range(retries + 1):
            if attempt:
                await asyncio.sleep(self.retry_delay)
            try:
                dims = _unpack(await target.measure_in_window())
            except Exception as exc:
                logger.debug("Measurement attempt %d raised: %s", attempt + 1, exc)
                continue
            logger.debug("Measurement attempt %d/%d: %s", attempt + 1, retries + 1, dims)
            if dims is None:
                continue
            x, y, w, h = dims
            if w > 0 and h > 0:
                return Rect(
                    top=y + self.top_inset,
                    left=x,
                    width=w,
                    height=h,
                    corner_radius=self.corner_radius,
                )

        logger.info("Target never reported a usable rectangle after %d attempts", retries + 1)
        return None
