"""
Fetching, decoding and placement of the optional hero illustration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("PNG", "JPEG")
SIDE_ALIGNMENTS = ("left", "right")


class HeroImageError(Exception):
    """Raised when the hero image cannot be used; always absorbed by the renderer."""


class ImageFetchError(HeroImageError):
    pass


class ImageDecodeError(HeroImageError):
    pass


@dataclass(frozen=True)
class DecodedImage:
    format: str
    width: int
    height: int
    image: Image.Image

    def reader(self) -> ImageReader:
        return ImageReader(self.image)


@dataclass(frozen=True)
class HeroImageRect:
    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y + self.height


def fetch_image_bytes(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 30.0,
) -> bytes:
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise ImageFetchError(f"Could not fetch hero image from {url}") from exc
    return response.content


def decode_image(data: bytes) -> DecodedImage:
    """
    Decode raw bytes as PNG, falling back to JPEG. Any other payload is rejected.
    """
    if not data:
        raise ImageDecodeError("Hero image payload is empty.")

    for image_format in SUPPORTED_FORMATS:
        try:
            image = Image.open(BytesIO(data), formats=[image_format])
            image.load()
        except Image.DecompressionBombError as exc:
            raise ImageDecodeError("Hero image exceeds the decoder's pixel limit.") from exc
        except (UnidentifiedImageError, OSError, SyntaxError):
            continue

        try:
            if image.mode not in ("RGB", "RGBA", "L"):
                image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
        except (OSError, ValueError, MemoryError) as exc:
            raise ImageDecodeError("Hero image could not be converted to RGB.") from exc

        width, height = image.size
        if width <= 0 or height <= 0:
            raise ImageDecodeError("Hero image has invalid dimensions.")
        return DecodedImage(format=image_format, width=width, height=height, image=image)

    raise ImageDecodeError("Hero image is neither PNG nor JPEG.")


def load_hero_image(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 30.0,
) -> Optional[DecodedImage]:
    try:
        return decode_image(fetch_image_bytes(url, session=session, timeout=timeout))
    except HeroImageError:
        logger.warning("Hero image unavailable; rendering without it.", exc_info=True)
        return None


def place_hero_image(
    image: DecodedImage,
    alignment: str | None,
    *,
    page_width: float,
    page_height: float,
    margin: float,
    side_ratio: float = 0.4,
    max_height_ratio: float = 1.0,
) -> HeroImageRect:
    """
    Scale the image to its target width (never upscaling) and pin it to the top margin.
    """
    available_width = page_width - 2 * margin
    available_height = page_height - 2 * margin

    target_width = available_width * (side_ratio if alignment in SIDE_ALIGNMENTS else 1.0)
    scale = min(1.0, target_width / image.width)
    if image.height * scale > available_height * max_height_ratio:
        scale = available_height * max_height_ratio / image.height

    draw_width = image.width * scale
    draw_height = image.height * scale

    if alignment == "left":
        x = margin
    elif alignment == "right":
        x = page_width - margin - draw_width
    else:
        x = margin + (available_width - draw_width) / 2

    y = page_height - margin - draw_height
    return HeroImageRect(x=x, y=y, width=draw_width, height=draw_height)
