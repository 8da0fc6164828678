"""
High-level utilities for rendering stories into bordered, paginated, printable PDFs.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Optional

import requests
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from storyprint.story import Story

from .document import ImageOp, StoryDocument
from .flow import TextFlow
from .images import DecodedImage, HeroImageRect, load_hero_image, place_hero_image
from .layout import DEFAULT_LAYOUT, DEFAULT_MARGIN, DEFAULT_PAGE_SIZE, PageLayoutConfig
from .printing import DEFAULT_FALLBACK_DELAY, PrintCommand, PrintJob, Viewer

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30.0


def _timeout_from_env() -> float:
    raw = os.getenv("STORYPRINT_IMAGE_TIMEOUT")
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(
            f"STORYPRINT_IMAGE_TIMEOUT must be a number of seconds, got {raw!r}"
        ) from exc


class StoryPDFBuilder:
    """
    Render a single story into a printable PDF.

    The document carries:
      * An optional hero illustration pinned to the top of page 1. Side-aligned
        images narrow the text column for every line beside them.
      * The title, a rule, the genre and read-time rows, another rule, then the body.
      * A triple decorative border and a centered page number on every page.
    """

    def __init__(
        self,
        *,
        page_size: tuple[float, float] = DEFAULT_PAGE_SIZE,
        margin: float = DEFAULT_MARGIN,
        layout: PageLayoutConfig = DEFAULT_LAYOUT,
        request_timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.page_size = page_size
        self.margin = margin
        self.layout = layout
        self.request_timeout = (
            request_timeout if request_timeout is not None else _timeout_from_env()
        )
        self.session = session

    def build_document(self, story: Story) -> StoryDocument:
        width, height = self.page_size
        document = StoryDocument.create(
            width, height, margin=self.margin, layout=self.layout, title=story.title
        )

        hero_rect = self._draw_hero_image(document, story)
        alignment = story.hero_image.alignment if story.hero_image else None

        if hero_rect is not None and alignment in ("left", "right"):
            flow = TextFlow(document, hero_rect=hero_rect, alignment=alignment)
        else:
            flow = TextFlow(document)
            if hero_rect is not None:
                flow.move_below(hero_rect.y - self.layout.section_spacing)

        flow.flow_story(story)
        document.finalize()
        logger.debug("Rendered %r into %d page(s)", story.title, document.page_count)
        return document

    def render_to_bytes(self, story: Story) -> bytes:
        return self.build_document(story).to_bytes()

    # ------------------------------------------------------------------ output sinks

    def save_to_file(self, story: Story, directory: Path | str = ".") -> Path:
        output_dir = Path(directory)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / story.filename("pdf")
        output_file.write_bytes(self.render_to_bytes(story))
        logger.info("Saved %r to %s", story.title, output_file)
        return output_file

    def open_for_print(
        self,
        story: Story,
        *,
        viewer: Viewer | None = None,
        print_command: PrintCommand | None = None,
        fallback_delay: float = DEFAULT_FALLBACK_DELAY,
        directory: Path | str | None = None,
    ) -> PrintJob:
        """
        Write the PDF and start a print job for it.

        Without ``directory`` the file goes to a fresh temporary directory owned by the
        returned job; ``PrintJob.cleanup()`` removes it.
        """
        owned_dir = None
        if directory is None:
            owned_dir = Path(tempfile.mkdtemp(prefix="storyprint-"))
        target_dir = Path(directory) if directory is not None else owned_dir

        try:
            output_file = self.save_to_file(story, target_dir)
            job = PrintJob(
                output_file,
                viewer=viewer,
                print_command=print_command,
                fallback_delay=fallback_delay,
                owned_dir=owned_dir,
            )
            return job.open()
        except Exception:
            if owned_dir is not None:
                shutil.rmtree(owned_dir, ignore_errors=True)
            raise

    # ------------------------------------------------------------------ hero image

    def _draw_hero_image(
        self, document: StoryDocument, story: Story
    ) -> Optional[HeroImageRect]:
        if story.hero_image is None:
            return None

        image: DecodedImage | None = load_hero_image(
            story.hero_image.url,
            session=self.session,
            timeout=self.request_timeout,
        )
        if image is None:
            return None

        rect = place_hero_image(
            image,
            story.hero_image.alignment,
            page_width=document.width,
            page_height=document.height,
            margin=document.margin,
            side_ratio=self.layout.side_image_ratio,
            max_height_ratio=self.layout.max_image_height_ratio,
        )
        document.pages[0].draw(
            ImageOp(
                image=image.reader(),
                x=rect.x,
                y=rect.y,
                width=rect.width,
                height=rect.height,
            )
        )
        return rect


def register_story_fonts(
    regular: Path | str, bold: Path | str, italic: Path | str
) -> PageLayoutConfig:
    """
    Register TTF files with reportlab and return DEFAULT_LAYOUT using them.
    """
    names: dict[str, str] = {}
    for key, font_path in (("regular", regular), ("bold", bold), ("italic", italic)):
        font_name = f"Story-{key.capitalize()}"
        if font_name not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
        names[key] = font_name

    layout = DEFAULT_LAYOUT
    return replace(
        layout,
        title_style=replace(layout.title_style, font_name=names["bold"]),
        meta_style=replace(layout.meta_style, font_name=names["italic"]),
        body_style=replace(layout.body_style, font_name=names["regular"]),
        page_number_font=names["regular"],
    )


def render_to_bytes(story: Story) -> bytes:
    return StoryPDFBuilder().render_to_bytes(story)


def save_to_file(story: Story, directory: Path | str = ".") -> Path:
    return StoryPDFBuilder().save_to_file(story, directory)


def open_for_print(story: Story, **kwargs) -> PrintJob:
    return StoryPDFBuilder().open_for_print(story, **kwargs)
