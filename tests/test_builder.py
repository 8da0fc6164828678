"""
Tests for the builder's output sinks and configuration.
"""

import os
from pathlib import Path

import pytest
import reportlab

from conftest import FakeSession, count_pdf_pages, make_image_bytes, make_oversized_png, make_story
from storyprint import render_to_bytes
from storyprint.pdf_generation import PAGE_SIZES, StoryPDFBuilder, register_story_fonts
from storyprint.pdf_generation.document import ImageOp
from storyprint.story import HeroImage


class TestRenderToBytes:
    def test_short_story_is_single_page_pdf(self):
        data = render_to_bytes(make_story("Hello world.", title="Gems"))
        assert data.startswith(b"%PDF")
        assert count_pdf_pages(data) == 1

    def test_pdf_page_count_matches_document(self, long_body):
        builder = StoryPDFBuilder()
        story = make_story(long_body * 4)
        assert count_pdf_pages(builder.render_to_bytes(story)) == builder.build_document(story).page_count

    def test_image_is_embedded_on_first_page_only(self, side_story, png_bytes):
        builder = StoryPDFBuilder(session=FakeSession(png_bytes), request_timeout=1)
        document = builder.build_document(side_story)
        images = [(page.number, op) for page in document.pages for op in page.ops if isinstance(op, ImageOp)]
        assert [number for number, _ in images] == [1]
        assert builder.render_to_bytes(side_story).startswith(b"%PDF")

    def test_unreachable_image_never_raises(self, long_body):
        story = make_story(long_body, hero_image=HeroImage("http://127.0.0.1:9/missing.png", "left"))
        data = StoryPDFBuilder(request_timeout=0.5).render_to_bytes(story)
        assert data.startswith(b"%PDF")

    def test_oversized_image_never_raises(self, side_story):
        builder = StoryPDFBuilder(session=FakeSession(make_oversized_png()), request_timeout=1)
        assert builder.render_to_bytes(side_story).startswith(b"%PDF")

    def test_page_size_is_configurable(self):
        builder = StoryPDFBuilder(page_size=PAGE_SIZES["letter"])
        document = builder.build_document(make_story())
        assert (document.width, document.height) == PAGE_SIZES["letter"]


class TestSaveToFile:
    def test_writes_title_named_pdf(self, tmp_path):
        path = StoryPDFBuilder().save_to_file(make_story(title="Gems"), tmp_path)
        assert path == tmp_path / "Gems.pdf"
        assert path.read_bytes().startswith(b"%PDF")

    def test_creates_missing_directory(self, tmp_path):
        target = tmp_path / "exports" / "2024"
        path = StoryPDFBuilder().save_to_file(make_story(title="A/B"), target)
        assert path.parent == target
        assert path.name == "A_B.pdf"


class TestOpenForPrint:
    def test_prints_once_when_viewer_and_timer_both_fire(self, tmp_path):
        printed = []
        job = StoryPDFBuilder().open_for_print(
            make_story(title="Gems"),
            viewer=lambda uri: True,
            print_command=printed.append,
            fallback_delay=0.01,
            directory=tmp_path,
        )
        job.wait(timeout=2)
        assert printed == [tmp_path / "Gems.pdf"]
        assert job.path.exists()


class TestConfiguration:
    def test_timeout_from_environment(self, monkeypatch):
        monkeypatch.setenv("STORYPRINT_IMAGE_TIMEOUT", "4.5")
        assert StoryPDFBuilder().request_timeout == 4.5

    def test_explicit_timeout_wins(self, monkeypatch):
        monkeypatch.setenv("STORYPRINT_IMAGE_TIMEOUT", "4.5")
        assert StoryPDFBuilder(request_timeout=2).request_timeout == 2

    def test_default_timeout(self, monkeypatch):
        monkeypatch.delenv("STORYPRINT_IMAGE_TIMEOUT", raising=False)
        assert StoryPDFBuilder().request_timeout == 30.0

    def test_invalid_timeout_rejected(self, monkeypatch):
        monkeypatch.setenv("STORYPRINT_IMAGE_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            StoryPDFBuilder()

    def test_timeout_is_passed_to_fetch(self, side_story):
        session = FakeSession(make_image_bytes())
        StoryPDFBuilder(session=session, request_timeout=7).build_document(side_story)
        assert session.calls == [("https://img.example/hero.png", 7)]

    def test_custom_fonts(self):
        font_dir = Path(reportlab.__file__).parent / "fonts"
        files = [font_dir / name for name in ("Vera.ttf", "VeraBd.ttf", "VeraIt.ttf")]
        if not all(os.path.exists(f) for f in files):
            pytest.skip("reportlab bundled Vera fonts not available")

        layout = register_story_fonts(*files)
        assert layout.body_style.font_name == "Story-Regular"
        assert layout.title_style.font_name == "Story-Bold"

        data = StoryPDFBuilder(layout=layout).render_to_bytes(make_story())
        assert data.startswith(b"%PDF")


class TestPrintCleanup:
    def test_temporary_directory_removed_by_cleanup(self):
        job = StoryPDFBuilder().open_for_print(
            make_story(title="Gems"),
            viewer=lambda uri: True,
            print_command=lambda path: None,
            fallback_delay=60,
        )
        folder = job.path.parent
        assert folder.name.startswith("storyprint-")
        job.cleanup()
        assert not folder.exists()

    def test_temporary_directory_removed_when_viewer_fails(self, monkeypatch, tmp_path):
        created = tmp_path / "storyprint-job"
        created.mkdir()
        monkeypatch.setattr("tempfile.mkdtemp", lambda prefix=None: str(created))

        def broken_viewer(uri):
            raise OSError("no viewer")

        with pytest.raises(OSError):
            StoryPDFBuilder().open_for_print(
                make_story(), viewer=broken_viewer, print_command=lambda path: None
            )
        assert not created.exists()

    def test_caller_directory_is_kept(self, tmp_path):
        job = StoryPDFBuilder().open_for_print(
            make_story(title="Gems"),
            viewer=lambda uri: True,
            print_command=lambda path: None,
            fallback_delay=60,
            directory=tmp_path,
        )
        job.cleanup()
        assert (tmp_path / "Gems.pdf").exists()
