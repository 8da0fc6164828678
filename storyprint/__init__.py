"""
Storyprint package exposing the story model and the PDF pagination engine.
"""

from .pdf_generation import (
    StoryPDFBuilder,
    open_for_print,
    render_to_bytes,
    save_to_file,
)
from .story import HeroImage, Story

__all__ = [
    "HeroImage",
    "Story",
    "StoryPDFBuilder",
    "open_for_print",
    "render_to_bytes",
    "save_to_file",
]
