# -*- coding: utf-8 -*-
"""Layout arithmetic that needs no live measurement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .models import Rect

BUBBLE_MARGIN = 20.0
# Arrow glyph half-width plus the bubble's inner padding.
ARROW_INSET = 35.0


@dataclass(frozen=True)
class Viewport:
    width: float = 390.0
    height: float = 844.0

    @property
    def bubble_width(self) -> float:
        return self.width - 2 * BUBBLE_MARGIN


def derive_grid_cells(
    container: Rect,
    reference: Rect,
    *,
    columns: int = 2,
    gap: float = 12.0,
    count: int = 4,
    corner_radius: float = 16.0,
) -> List[Rect]:
    """Compute every cell of a regular grid from its container and one cell.

    Only the container and the first cell expose a measurement handle, so the
    remaining cells are laid out arithmetically: cells share the container's
    left edge and the reference cell's top edge and height, and each column is
    ``(container.width - gap * (columns - 1)) / columns`` wide.
    """
    if columns < 1:
        raise ValueError("columns must be >= 1")
    if count < 0:
        raise ValueError("count must be >= 0")

    cell_width = (container.width - gap * (columns - 1)) / columns
    cell_height = reference.height
    cells: List[Rect] = []
    for idx in range(count):
        row, col = divmod(idx, columns)
        cells.append(
            Rect(
                top=reference.top + row * (cell_height + gap),
                left=container.left + col * (cell_width + gap),
                width=max(cell_width, 0.0),
                height=cell_height,
                corner_radius=corner_radius,
            )
        )
    return cells


def dim_regions(target: Rect, viewport: Viewport) -> List[Rect]:
    """Return the four overlay rectangles (top, left, right, bottom) around ``target``."""
    top = max(target.top, 0.0)
    bottom = min(target.bottom, viewport.height)
    band = max(bottom - top, 0.0)
    return [
        Rect(top=0.0, left=0.0, width=viewport.width, height=top, corner_radius=0),
        Rect(top=top, left=0.0, width=max(target.left, 0.0), height=band, corner_radius=0),
        Rect(
            top=top,
            left=min(target.right, viewport.width),
            width=max(viewport.width - target.right, 0.0),
            height=band,
            corner_radius=0,
        ),
        Rect(
            top=bottom,
            left=0.0,
            width=viewport.width,
            height=max(viewport.height - bottom, 0.0),
            corner_radius=0,
        ),
    ]
