from __future__ import annotations

import argparse
import sys
from pathlib import Path

import requests

from . import md_to_pages, pdf_export, renderer, text_utils
from .errors import MdSocialError
from .template import load_template


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mdsocial",
        description="Convert a Markdown article into a series of social-media images.",
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Path to the source Markdown file. It must start with a --- metadata block.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output_cards"),
        help="Directory where generated images will be written (default: output_cards).",
    )
    parser.add_argument(
        "--template",
        type=str,
        help="HTML template file path or http(s) URL (default: bundled template).",
    )
    parser.add_argument(
        "--theme",
        type=str,
        default=md_to_pages.DEFAULT_THEME,
        help=f"Theme name passed to the template (default: {md_to_pages.DEFAULT_THEME}).",
    )
    parser.add_argument(
        "--layout",
        choices=sorted(md_to_pages.DIMENSIONS),
        default=md_to_pages.DEFAULT_LAYOUT,
        help=f"Image layout (default: {md_to_pages.DEFAULT_LAYOUT}).",
    )
    parser.add_argument(
        "--characters-per-page",
        type=int,
        default=text_utils.DEFAULT_WORD_LIMIT,
        help=(
            "Number of words per content page "
            f"(default: {text_utils.DEFAULT_WORD_LIMIT})."
        ),
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=md_to_pages.DEFAULT_PAGE_LIMIT,
        help=(
            "Total number of pages including the metadata and closing pages "
            f"(default: {md_to_pages.DEFAULT_PAGE_LIMIT})."
        ),
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=renderer.DEFAULT_TIMEOUT_MS / 1000,
        help="Seconds to wait for each page to load and be captured (default: 30).",
    )
    parser.add_argument(
        "--escape-meta",
        action="store_true",
        help="HTML-escape metadata values instead of inserting them as markup.",
    )
    parser.add_argument(
        "--pdf",
        action="store_true",
        help="Also bundle the generated images into <name>.pdf in the output directory.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not args.input.exists():
        print(f"Markdown file not found: {args.input}", file=sys.stderr)
        return 1

    if args.timeout < 0:
        print(f"--timeout must not be negative, got {args.timeout}", file=sys.stderr)
        return 1

    try:
        options = md_to_pages.RenderOptions(
            layout=args.layout,
            theme=args.theme,
            characters_per_page=args.characters_per_page,
            limit=args.limit,
        )
        template = load_template(args.template, debug=args.debug)
    except (ValueError, FileNotFoundError, requests.RequestException) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    try:
        markdown_text = args.input.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Unable to read {args.input}: {exc}", file=sys.stderr)
        return 1
    base_file_name = args.input.stem or "page"
    md = md_to_pages.create_markdown_renderer()

    try:
        output_files = md_to_pages.markdown_to_png(
            markdown_text,
            args.output_dir,
            base_file_name,
            template,
            options,
            md=md,
            escape_meta=args.escape_meta,
            timeout_ms=int(args.timeout * 1000),
            debug=args.debug,
        )
    except MdSocialError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.pdf:
        pdf_path = pdf_export.export_pages_to_pdf(
            output_files, args.output_dir / f"{base_file_name}.pdf", debug=args.debug
        )
        print(f"Wrote {pdf_path.resolve()}")

    print(f"Generated {len(output_files)} pages in {args.output_dir.resolve()}")
    return 0
