"""
Turn a markdown article into a fixed number of social-media images.

Page 1 shows the article metadata, the following pages carry the article text
in word-bounded chunks, and the last page is a closing "read more" card. Each
page is an HTML template filled with the page content and captured by a
headless browser.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from markdown_it import MarkdownIt
from PIL import Image, UnidentifiedImageError

from .errors import MissingMetadataError, RenderError, UnknownLayoutError
from .renderer import DEFAULT_TIMEOUT_MS, BrowserSession
from .template import fill_template
from .text_utils import (
    DEFAULT_WORD_LIMIT,
    generate_meta_content,
    parse_meta,
    split_text_into_chunks,
)

DIMENSIONS: Dict[str, Tuple[int, int]] = {
    "portrait": (1080, 1920),
    "square": (1080, 1080),
    "landscape": (1920, 1080),
}
DEFAULT_LAYOUT = "portrait"
DEFAULT_THEME = "light"
DEFAULT_PAGE_LIMIT = 10
CLOSING_PAGE_HTML = (
    "<p>I invite you to read the full article on my blog! Link in Bio!</p>"
)
MARKDOWN_PRESET = "js-default"


def resolve_dimensions(layout: str) -> Tuple[int, int]:
    try:
        return DIMENSIONS[layout]
    except KeyError:
        raise UnknownLayoutError(
            f"Unrecognized layout '{layout}'. "
            f"Use one of {', '.join(sorted(DIMENSIONS))}."
        ) from None


@dataclass(frozen=True)
class RenderOptions:
    layout: str = DEFAULT_LAYOUT
    theme: str = DEFAULT_THEME
    # Word budget per content page; the name is historical.
    characters_per_page: int = DEFAULT_WORD_LIMIT
    limit: int = DEFAULT_PAGE_LIMIT

    def __post_init__(self) -> None:
        resolve_dimensions(self.layout)
        if self.characters_per_page < 1:
            raise ValueError(
                f"characters_per_page must be positive, got {self.characters_per_page}"
            )
        if self.limit < 2:
            raise ValueError(
                f"limit must leave room for the metadata and closing pages, got {self.limit}"
            )

    @property
    def dimensions(self) -> Tuple[int, int]:
        return resolve_dimensions(self.layout)


@dataclass(frozen=True)
class PagePayload:
    number: int
    html: str


def create_markdown_renderer() -> MarkdownIt:
    return MarkdownIt(MARKDOWN_PRESET)


def plan_pages(
    markdown_text: str,
    options: RenderOptions,
    md: Optional[MarkdownIt] = None,
    escape_meta: bool = False,
) -> List[PagePayload]:
    """Build the HTML payload of every page without rendering anything.

    Content pages run from 2 up to at most ``limit - 1``; the closing page is
    always numbered ``limit``, even when the article ran out of chunks early.
    """
    meta = parse_meta(markdown_text)
    if meta is None:
        raise MissingMetadataError("Metadata not found in the markdown file.")

    if md is None:
        md = create_markdown_renderer()

    pages = [PagePayload(1, generate_meta_content(meta, escape=escape_meta))]

    chunks = split_text_into_chunks(markdown_text, options.characters_per_page)
    content_pages = min(options.limit - 2, len(chunks))
    for index in range(content_pages):
        pages.append(PagePayload(index + 2, f"<p>{md.render(chunks[index])}</p>"))

    pages.append(PagePayload(options.limit, CLOSING_PAGE_HTML))
    return pages


def output_file_name(base_file_name: str, page_num: int, width: int, height: int) -> str:
    return f"{base_file_name}-{page_num}-{width}x{height}.png"


def ensure_output_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _check_snapshot(path: Path, debug: bool = False) -> Tuple[int, int]:
    try:
        with Image.open(path) as image:
            size = image.size
    except (UnidentifiedImageError, OSError) as exc:
        raise RenderError(f"Browser did not produce a readable image at {path}: {exc}") from exc
    if debug:
        print(f"[DEBUG] Saved {path} ({size[0]}x{size[1]}px)")
    return size


def generate_page_from_template(
    session: BrowserSession,
    html_content: str,
    output_dir: Path,
    base_file_name: str,
    page_num: int,
    template: str,
    options: RenderOptions,
    debug: bool = False,
) -> Path:
    width, height = options.dimensions
    final_html = fill_template(
        template, html_content, options.theme, options.layout, width, height
    )
    output_path = output_dir / output_file_name(base_file_name, page_num, width, height)
    session.snapshot(final_html, output_path, width, height)
    _check_snapshot(output_path, debug=debug)
    print(f"Generating page {page_num} of {options.limit} ({output_path}) ", end="\r")
    return output_path


def markdown_to_png(
    markdown_text: str,
    output_dir: Path,
    base_file_name: str,
    template: str,
    options: RenderOptions,
    md: Optional[MarkdownIt] = None,
    session: Optional[BrowserSession] = None,
    escape_meta: bool = False,
    timeout_ms: Optional[int] = None,
    debug: bool = False,
) -> List[Path]:
    """Render every page of the article and return the written PNG paths.

    Layout and metadata are validated before the browser is launched. Pages
    are captured one at a time in page order; any failure aborts the run
    without touching files that were already written.
    """
    width, height = options.dimensions
    print(f"Layout: {options.layout} ({width}x{height})")

    pages = plan_pages(markdown_text, options, md=md, escape_meta=escape_meta)
    if debug:
        print(
            f"[DEBUG] Planned {len(pages)} pages "
            f"({len(pages) - 2} content pages, closing page {options.limit})"
        )

    output_dir = Path(output_dir)
    ensure_output_dir(output_dir)

    if timeout_ms is None:
        timeout_ms = DEFAULT_TIMEOUT_MS

    if session is None:
        with BrowserSession(timeout_ms=timeout_ms, debug=debug) as browser:
            output_paths = _render_pages(
                browser, pages, output_dir, base_file_name, template, options, debug
            )
    else:
        output_paths = _render_pages(
            session, pages, output_dir, base_file_name, template, options, debug
        )
    print()
    return output_paths


def _render_pages(
    session: BrowserSession,
    pages: List[PagePayload],
    output_dir: Path,
    base_file_name: str,
    template: str,
    options: RenderOptions,
    debug: bool,
) -> List[Path]:
    return [
        generate_page_from_template(
            session,
            page.html,
            output_dir,
            base_file_name,
            page.number,
            template,
            options,
            debug=debug,
        )
        for page in pages
    ]
