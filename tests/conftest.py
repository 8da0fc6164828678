"""
Shared fixtures: in-memory images and a stand-in for ``requests.Session``.
"""

import re
import struct
import zlib
from io import BytesIO

import pytest
import requests
from PIL import Image

from storyprint.story import HeroImage, Story

LOREM = (
    "When I was a child my grandmother kept a tin of buttons on the kitchen shelf, "
    "and on rainy afternoons we would pour them out across the table and sort them "
    "by colour, by size, and by the stories she remembered about the coats and "
    "dresses they had once belonged to."
)


def make_image_bytes(size=(400, 300), fmt="PNG", color="red"):
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, fmt)
    return buffer.getvalue()


def make_oversized_png(width=20000, height=10000):
    """PNG header declaring more pixels than Pillow agrees to decode."""
    def chunk(kind, payload):
        return (
            struct.pack(">I", len(payload))
            + kind
            + payload
            + struct.pack(">I", zlib.crc32(kind + payload) & 0xFFFFFFFF)
        )

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b"\x00"))
        + chunk(b"IEND", b"")
    )


def count_pdf_pages(data):
    return len(re.findall(rb"/Type /Page\b", data))


class FakeResponse:
    def __init__(self, content=b"", status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, content=b"", status_code=200, error=None):
        self.content = content
        self.status_code = status_code
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.content, self.status_code)


def make_story(body=LOREM, *, title="Buttons", hero_image=None):
    return Story(
        title=title,
        genre="Memoir",
        read_time="3 minutes read",
        body=body,
        hero_image=hero_image,
    )


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def long_body():
    return "\n\n".join(LOREM for _ in range(8))


@pytest.fixture
def side_story(long_body):
    return make_story(
        long_body, hero_image=HeroImage(url="https://img.example/hero.png", alignment="left")
    )
