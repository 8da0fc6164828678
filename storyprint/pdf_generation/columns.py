"""
Horizontal text band available to a line, given the hero image beside it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .images import HeroImageRect
from .layout import MIN_COLUMN_WIDTH


@dataclass(frozen=True)
class ColumnRegion:
    x: float
    max_width: float


def overlaps(y: float, line_height: float, rect: HeroImageRect | None) -> bool:
    """
    True when the line band [y - line_height, y] intersects the image's vertical extent.
    """
    if rect is None:
        return False
    line_bottom = y - line_height
    return not (line_bottom >= rect.top or y <= rect.y)


def resolve_column(
    y: float,
    line_height: float,
    hero_rect: HeroImageRect | None,
    alignment: str | None,
    *,
    page_width: float,
    margin: float,
    gap: float = 12.0,
    min_width: float = MIN_COLUMN_WIDTH,
) -> ColumnRegion:
    full = ColumnRegion(x=margin, max_width=page_width - 2 * margin)
    if alignment not in ("left", "right") or not overlaps(y, line_height, hero_rect):
        return full

    if alignment == "left":
        x = hero_rect.x + hero_rect.width + gap
        narrowed = ColumnRegion(x=x, max_width=page_width - margin - x)
    else:
        narrowed = ColumnRegion(x=margin, max_width=hero_rect.x - margin - gap)

    # A sliver too narrow to hold text falls back to the full band.
    if narrowed.max_width < min_width:
        return full
    return narrowed
