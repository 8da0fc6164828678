"""
Render a story YAML/JSON file into a printable PDF, optionally sending it to the printer.

Usage:
    python scripts/render_story_pdf.py \
        --story my_story.yaml \
        --output-dir exports/
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on the Python path.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from storyprint import Story, StoryPDFBuilder  # noqa: E402
from storyprint.pdf_generation import DEFAULT_LAYOUT, PAGE_SIZES, register_story_fonts  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a story file into a bordered, paginated PDF."
    )
    parser.add_argument(
        "--story",
        required=True,
        help="Path to the story YAML or JSON file.",
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory the PDF is written to (default: current directory).",
    )
    parser.add_argument(
        "--page-size",
        choices=sorted(PAGE_SIZES.keys()),
        default="a4",
        help="Page size to render (default: a4).",
    )
    parser.add_argument(
        "--margin",
        type=float,
        default=50.0,
        help="Page margin in points (default: 50).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Timeout in seconds for downloading the hero image "
        "(default: STORYPRINT_IMAGE_TIMEOUT or 30).",
    )
    parser.add_argument(
        "--fonts",
        nargs=3,
        metavar=("REGULAR", "BOLD", "ITALIC"),
        default=None,
        help="Optional TTF files replacing the built-in Times family.",
    )
    parser.add_argument(
        "--print",
        dest="send_to_printer",
        action="store_true",
        help="Open the PDF in a viewer and send it to the system printer.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    story = Story.from_file(args.story)
    layout = register_story_fonts(*args.fonts) if args.fonts else DEFAULT_LAYOUT

    builder = StoryPDFBuilder(
        page_size=PAGE_SIZES[args.page_size],
        margin=args.margin,
        layout=layout,
        request_timeout=args.timeout,
    )

    if args.send_to_printer:
        job = builder.open_for_print(story, directory=args.output_dir)
        job.wait()
        print(f"Sent {job.path} to the printer")
        return 0

    output_file = builder.save_to_file(story, args.output_dir)
    print(f"Rendered story PDF to {output_file}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
