"""
Pagination engine turning a story into a bordered, printable PDF.
"""

from .builder import (
    StoryPDFBuilder,
    open_for_print,
    register_story_fonts,
    render_to_bytes,
    save_to_file,
)
from .columns import ColumnRegion, overlaps, resolve_column
from .document import Page, StoryDocument
from .flow import LayoutCursor, TextFlow
from .images import (
    HeroImageError,
    HeroImageRect,
    ImageDecodeError,
    ImageFetchError,
    decode_image,
    load_hero_image,
    place_hero_image,
)
from .layout import DEFAULT_LAYOUT, PAGE_SIZES, PageLayoutConfig, TextStyle
from .printing import PrintJob

__all__ = [
    "ColumnRegion",
    "DEFAULT_LAYOUT",
    "HeroImageError",
    "HeroImageRect",
    "ImageDecodeError",
    "ImageFetchError",
    "LayoutCursor",
    "PAGE_SIZES",
    "Page",
    "PageLayoutConfig",
    "PrintJob",
    "StoryDocument",
    "StoryPDFBuilder",
    "TextFlow",
    "TextStyle",
    "decode_image",
    "load_hero_image",
    "open_for_print",
    "overlaps",
    "place_hero_image",
    "register_story_fonts",
    "render_to_bytes",
    "resolve_column",
    "save_to_file",
]
