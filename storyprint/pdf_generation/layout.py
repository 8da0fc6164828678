"""
Page geometry, typography and decoration settings shared by the story PDF engine.
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.units import inch

FONT_NORMAL = "Times-Roman"
FONT_BOLD = "Times-Bold"
FONT_ITALIC = "Times-Italic"

PAGE_SIZES = {
    "a4": A4,
    "letter": LETTER,
    "square": (8 * inch, 8 * inch),
}

DEFAULT_PAGE_SIZE = PAGE_SIZES["a4"]
DEFAULT_MARGIN = 50.0

# Narrowest column a line may be squeezed into beside a side image.
MIN_COLUMN_WIDTH = 72.0


@dataclass(frozen=True)
class BorderSpec:
    inset: float
    stroke_width: float
    color: colors.Color


@dataclass(frozen=True)
class TextStyle:
    """
    Parameters for one call site of the wrap routine (title, metadata, body).
    """

    font_name: str
    font_size: float
    color: colors.Color
    line_height_multiplier: float = 1.2
    paginates: bool = True
    centered: bool = False

    @property
    def line_height(self) -> float:
        return self.font_size * self.line_height_multiplier


@dataclass(frozen=True)
class PageLayoutConfig:
    title_style: TextStyle
    meta_style: TextStyle
    body_style: TextStyle
    borders: tuple[BorderSpec, BorderSpec, BorderSpec]
    rule_color: colors.Color
    rule_width: float
    page_number_font: str
    page_number_size: float
    page_number_color: colors.Color
    section_spacing: float = 24.0
    rule_gap: float = 18.0
    image_gap: float = 12.0
    side_image_ratio: float = 0.4
    max_image_height_ratio: float = 1.0
    min_column_width: float = MIN_COLUMN_WIDTH

    @property
    def paragraph_gap(self) -> float:
        return self.body_style.font_size * 0.6


DEFAULT_LAYOUT = PageLayoutConfig(
    title_style=TextStyle(
        font_name=FONT_BOLD,
        font_size=24,
        color=colors.Color(0.1, 0.2, 0.4),
        line_height_multiplier=1.2,
        centered=True,
    ),
    meta_style=TextStyle(
        font_name=FONT_ITALIC,
        font_size=12,
        color=colors.Color(0.3, 0.3, 0.3),
        line_height_multiplier=1.4,
    ),
    body_style=TextStyle(
        font_name=FONT_NORMAL,
        font_size=12,
        color=colors.Color(0.1, 0.1, 0.1),
        line_height_multiplier=1.6,
    ),
    borders=(
        BorderSpec(inset=14, stroke_width=2.0, color=colors.HexColor("#1D3557")),
        BorderSpec(inset=19, stroke_width=1.0, color=colors.HexColor("#457B9D")),
        BorderSpec(inset=23, stroke_width=0.5, color=colors.HexColor("#A8DADC")),
    ),
    rule_color=colors.HexColor("#A8DADC"),
    rule_width=0.8,
    page_number_font=FONT_NORMAL,
    page_number_size=10,
    page_number_color=colors.Color(0.5, 0.5, 0.5),
)
