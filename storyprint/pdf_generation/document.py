"""
In-memory page model for story documents and its serialization to PDF bytes.

Pages keep a display list of drawing operations instead of drawing straight onto a
reportlab canvas, so page numbers can be stamped after all content has been placed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Iterator, Union

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .layout import DEFAULT_LAYOUT, PageLayoutConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextOp:
    text: str
    x: float
    y: float
    font_name: str
    font_size: float
    color: colors.Color
    role: str = "body"
    max_width: float | None = None


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke_width: float
    color: colors.Color


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    width: float
    height: float
    stroke_width: float
    color: colors.Color


@dataclass(frozen=True)
class ImageOp:
    image: ImageReader
    x: float
    y: float
    width: float
    height: float


DrawOp = Union[TextOp, LineOp, RectOp, ImageOp]


@dataclass
class Page:
    number: int
    width: float
    height: float
    ops: list[DrawOp] = field(default_factory=list)

    def draw(self, op: DrawOp) -> None:
        self.ops.append(op)

    def text_ops(self, role: str | None = None) -> list[TextOp]:
        return [
            op
            for op in self.ops
            if isinstance(op, TextOp) and (role is None or op.role == role)
        ]


class StoryDocument:
    """
    Ordered sequence of decorated pages for a single story render.
    """

    def __init__(
        self,
        width: float,
        height: float,
        *,
        margin: float,
        layout: PageLayoutConfig = DEFAULT_LAYOUT,
        title: str | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.margin = margin
        self.layout = layout
        self.title = title
        self.pages: list[Page] = []
        self._finalized = False

    @classmethod
    def create(
        cls,
        width: float,
        height: float,
        *,
        margin: float,
        layout: PageLayoutConfig = DEFAULT_LAYOUT,
        title: str | None = None,
    ) -> "StoryDocument":
        document = cls(width, height, margin=margin, layout=layout, title=title)
        document.add_page()
        return document

    @property
    def current_page(self) -> Page:
        return self.pages[-1]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def add_page(self) -> Page:
        page = Page(number=len(self.pages) + 1, width=self.width, height=self.height)
        self._draw_borders(page)
        self.pages.append(page)
        logger.debug("Allocated page %d", page.number)
        return page

    def finalize(self) -> None:
        if self._finalized:
            return

        layout = self.layout
        for page in self.pages:
            label = str(page.number)
            label_width = pdfmetrics.stringWidth(
                label, layout.page_number_font, layout.page_number_size
            )
            page.draw(
                TextOp(
                    text=label,
                    x=(self.width - label_width) / 2,
                    y=self.margin / 2,
                    font_name=layout.page_number_font,
                    font_size=layout.page_number_size,
                    color=layout.page_number_color,
                    role="page_number",
                )
            )
        self._finalized = True

    def lines(self, role: str | None = None) -> Iterator[tuple[Page, TextOp]]:
        for page in self.pages:
            for op in page.text_ops(role):
                yield page, op

    def to_bytes(self) -> bytes:
        self.finalize()

        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(self.width, self.height))
        if self.title:
            pdf.setTitle(self.title)

        for page in self.pages:
            for op in page.ops:
                _render_op(pdf, op)
            pdf.showPage()

        pdf.save()
        return buffer.getvalue()

    def _draw_borders(self, page: Page) -> None:
        for border in self.layout.borders:
            page.draw(
                RectOp(
                    x=border.inset,
                    y=border.inset,
                    width=self.width - 2 * border.inset,
                    height=self.height - 2 * border.inset,
                    stroke_width=border.stroke_width,
                    color=border.color,
                )
            )


def _render_op(pdf: canvas.Canvas, op: DrawOp) -> None:
    pdf.saveState()
    if isinstance(op, TextOp):
        pdf.setFont(op.font_name, op.font_size)
        pdf.setFillColor(op.color)
        pdf.drawString(op.x, op.y, op.text)
    elif isinstance(op, LineOp):
        pdf.setLineWidth(op.stroke_width)
        pdf.setStrokeColor(op.color)
        pdf.line(op.x1, op.y1, op.x2, op.y2)
    elif isinstance(op, RectOp):
        pdf.setLineWidth(op.stroke_width)
        pdf.setStrokeColor(op.color)
        pdf.rect(op.x, op.y, op.width, op.height, stroke=1, fill=0)
    elif isinstance(op, ImageOp):
        pdf.drawImage(op.image, op.x, op.y, op.width, op.height, mask="auto")
    pdf.restoreState()
