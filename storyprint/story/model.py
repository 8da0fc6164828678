"""
Structured representation of a single story as supplied by the authoring app.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

ALIGNMENTS = ("left", "center", "right")

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SOFT_BREAK = re.compile(r"\r?\n")
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _normalize_alignment(value: Any) -> str | None:
    text = _coerce_str(value).lower()
    return text if text in ALIGNMENTS else None


@dataclass(frozen=True)
class HeroImage:
    url: str
    alignment: str | None = None

    @property
    def is_side_aligned(self) -> bool:
        return self.alignment in ("left", "right")

    @classmethod
    def from_value(cls, value: Any, alignment: Any = None) -> "HeroImage | None":
        if value is None:
            return None
        if isinstance(value, Mapping):
            url = _coerce_str(value.get("url"))
            alignment = value.get("alignment", alignment)
        else:
            url = _coerce_str(value)
        if not url:
            return None
        return cls(url=url, alignment=_normalize_alignment(alignment))


@dataclass(frozen=True)
class Story:
    """
    Immutable input record consumed by the PDF engine.
    """

    title: str
    genre: str = ""
    read_time: str = ""
    body: str = ""
    hero_image: HeroImage | None = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Story":
        """
        Build a story from snake-case keys or the remote API's field names.
        """
        title = _coerce_str(payload.get("title", payload.get("story_title")))
        if not title:
            raise ValueError("Story payload must include a non-empty 'title'.")

        if "hero_image" in payload:
            hero_image = HeroImage.from_value(payload["hero_image"])
        else:
            hero_image = HeroImage.from_value(
                payload.get("heroImageUrl"), payload.get("heroImageAlignment")
            )

        body = payload.get("body", payload.get("enhanced_story"))
        return cls(
            title=title,
            genre=_coerce_str(payload.get("genre")),
            read_time=_coerce_str(payload.get("read_time", payload.get("readTime"))),
            body="" if body is None else str(body),
            hero_image=hero_image,
        )

    @classmethod
    def from_file(cls, source: str | Path) -> "Story":
        path = Path(source)
        text = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise ValueError("Unsupported story file format. Use YAML or JSON.")

        if not isinstance(data, Mapping):
            raise ValueError("Story file must deserialize to a mapping.")
        return cls.from_mapping(data)

    def paragraphs(self) -> list[str]:
        paragraphs: list[str] = []
        for block in _PARAGRAPH_BREAK.split(self.body):
            cleaned = _SOFT_BREAK.sub(" ", block).strip()
            if cleaned:
                paragraphs.append(cleaned)
        return paragraphs

    def filename(self, extension: str = "pdf") -> str:
        stem = _UNSAFE_FILENAME_CHARS.sub("_", self.title).strip(" .") or "story"
        return f"{stem}.{extension}"
