"""
Tests for the column layout resolver.
"""

import pytest

from storyprint.pdf_generation.columns import ColumnRegion, overlaps, resolve_column
from storyprint.pdf_generation.images import HeroImageRect

PAGE_WIDTH = 600.0
MARGIN = 50.0
FULL = ColumnRegion(x=MARGIN, max_width=PAGE_WIDTH - 2 * MARGIN)

# Image occupying y in [600, 750].
RECT = HeroImageRect(x=MARGIN, y=600.0, width=200.0, height=150.0)


def _resolve(y, rect=RECT, alignment="left", line_height=20.0, **kwargs):
    return resolve_column(
        y, line_height, rect, alignment, page_width=PAGE_WIDTH, margin=MARGIN, gap=12.0, **kwargs
    )


class TestOverlap:
    @pytest.mark.parametrize("y", [750.0, 700.0, 610.0])
    def test_band_inside_image(self, y):
        assert overlaps(y, 20.0, RECT)

    def test_band_straddling_bottom_edge(self):
        assert overlaps(605.0, 20.0, RECT)

    def test_band_entirely_below(self):
        assert not overlaps(600.0, 20.0, RECT)
        assert not overlaps(550.0, 20.0, RECT)

    def test_band_entirely_above(self):
        assert not overlaps(790.0, 20.0, RECT)
        assert not overlaps(770.0, 20.0, RECT)

    def test_no_rect(self):
        assert not overlaps(700.0, 20.0, None)


class TestResolveColumn:
    def test_no_rect_gives_full_band(self):
        assert _resolve(700.0, rect=None) == FULL

    def test_left_image_pushes_text_right(self):
        column = _resolve(700.0)
        assert column.x == MARGIN + 200.0 + 12.0
        assert column.max_width == PAGE_WIDTH - MARGIN - column.x

    def test_right_image_narrows_from_the_right(self):
        rect = HeroImageRect(x=350.0, y=600.0, width=200.0, height=150.0)
        column = _resolve(700.0, rect=rect, alignment="right")
        assert column.x == MARGIN
        assert column.max_width == 350.0 - MARGIN - 12.0

    @pytest.mark.parametrize("alignment", ["center", None])
    def test_non_side_alignment_never_narrows(self, alignment):
        assert _resolve(700.0, alignment=alignment) == FULL

    def test_lines_below_image_use_full_band(self):
        assert _resolve(580.0) == FULL

    def test_column_changes_between_consecutive_lines(self):
        inside = _resolve(615.0)
        below = _resolve(595.0)
        assert inside.max_width < FULL.max_width
        assert below == FULL

    def test_sliver_column_falls_back_to_full_band(self):
        wide = HeroImageRect(x=MARGIN, y=600.0, width=450.0, height=150.0)
        assert _resolve(700.0, rect=wide) == FULL

    def test_min_width_is_configurable(self):
        column = _resolve(700.0, min_width=0.0)
        assert column.max_width < FULL.max_width
        assert _resolve(700.0, min_width=FULL.max_width) == FULL
