"""
Greedy line-breaking of story text onto document pages, with automatic overflow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from reportlab.pdfbase import pdfmetrics

from storyprint.story import Story

from .columns import ColumnRegion, resolve_column
from .document import LineOp, Page, StoryDocument, TextOp
from .images import HeroImageRect
from .layout import TextStyle

logger = logging.getLogger(__name__)


@dataclass
class LayoutCursor:
    page: Page
    y: float


class TextFlow:
    """
    Places wrapped lines top to bottom, asking the document for a new page on overflow.

    The hero rectangle narrows columns only while the cursor is on the page the
    image was drawn on.
    """

    def __init__(
        self,
        document: StoryDocument,
        *,
        hero_rect: HeroImageRect | None = None,
        alignment: str | None = None,
    ) -> None:
        self.document = document
        self.layout = document.layout
        self.margin = document.margin
        self.hero_rect = hero_rect
        self.alignment = alignment
        self._hero_page = document.current_page if hero_rect is not None else None
        self.cursor = LayoutCursor(page=document.current_page, y=self.top)

    @property
    def top(self) -> float:
        return self.document.height - self.margin

    def column_at(self, y: float, line_height: float) -> ColumnRegion:
        rect = self.hero_rect if self.cursor.page is self._hero_page else None
        return resolve_column(
            y,
            line_height,
            rect,
            self.alignment,
            page_width=self.document.width,
            margin=self.margin,
            gap=self.layout.image_gap,
            min_width=self.layout.min_column_width,
        )

    def move_below(self, y: float) -> None:
        self.cursor.y = min(self.cursor.y, y)

    def wrap_text(self, text: str, style: TextStyle, *, role: str = "body") -> int:
        """
        Greedily wrap ``text`` into lines; returns the number of lines drawn.

        A word wider than the column still gets a line of its own.
        """
        line_height = style.line_height
        current = ""
        drawn = 0
        for word in text.split():
            candidate = f"{current} {word}" if current else word
            column = self.column_at(self.cursor.y, line_height)
            if self._measure(candidate, style) <= column.max_width:
                current = candidate
                continue
            if current:
                self._flush(current, style, role)
                drawn += 1
            current = word
        if current:
            self._flush(current, style, role)
            drawn += 1
        return drawn

    def draw_rule(self) -> None:
        gap = self.layout.rule_gap
        if self.cursor.y < self.margin:
            self._new_page()
        column = self.column_at(self.cursor.y, gap)
        self.cursor.page.draw(
            LineOp(
                x1=column.x,
                y1=self.cursor.y,
                x2=column.x + column.max_width,
                y2=self.cursor.y,
                stroke_width=self.layout.rule_width,
                color=self.layout.rule_color,
            )
        )
        self.cursor.y -= gap

    def flow_story(self, story: Story) -> None:
        layout = self.layout
        self.wrap_text(story.title, layout.title_style, role="title")
        self.draw_rule()
        for label, value in (("Genre", story.genre), ("Read Time", story.read_time)):
            if value:
                self.wrap_text(f"{label}: {value}", layout.meta_style, role="meta")
        self.draw_rule()
        self.flow_paragraphs(story.paragraphs())
        logger.debug(
            "Flowed %r onto %d page(s)", story.title, self.document.page_count
        )

    def flow_paragraphs(self, paragraphs: Iterable[str]) -> None:
        style = self.layout.body_style
        for paragraph in paragraphs:
            self.wrap_text(paragraph, style, role="body")
            self.cursor.y -= self.layout.paragraph_gap

    def _flush(self, line: str, style: TextStyle, role: str) -> None:
        if style.paginates and self.cursor.y < self.margin:
            self._new_page()

        column = self.column_at(self.cursor.y, style.line_height)
        x = column.x
        if style.centered:
            x = max(column.x, column.x + (column.max_width - self._measure(line, style)) / 2)

        self.cursor.page.draw(
            TextOp(
                text=line,
                x=x,
                y=self.cursor.y,
                font_name=style.font_name,
                font_size=style.font_size,
                color=style.color,
                role=role,
                max_width=column.max_width,
            )
        )
        self.cursor.y -= style.line_height

    def _new_page(self) -> None:
        page = self.document.add_page()
        self.cursor = LayoutCursor(page=page, y=self.top)

    @staticmethod
    def _measure(text: str, style: TextStyle) -> float:
        return pdfmetrics.stringWidth(text, style.font_name, style.font_size)
