from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import requests

CONTENT_MARKER = "${content}"
THEME_MARKER = "${theme}"
LAYOUT_MARKER = "${layout}"
WIDTH_MARKER = "/*$width*/"
HEIGHT_MARKER = "/*$height*/"
DEFAULT_TEMPLATE_FILENAME = "default.html"


def _resources_dir() -> Path:
    return Path(__file__).resolve().parent / "resources"


def load_template(spec: Optional[str] = None, debug: bool = False) -> str:
    """Load an HTML template from a URL, a file path, or the bundled default."""
    if not spec:
        return (_resources_dir() / DEFAULT_TEMPLATE_FILENAME).read_text(encoding="utf-8")

    if re.match(r"^https?://", spec, flags=re.IGNORECASE):
        if debug:
            print(f"[DEBUG] Downloading template from {spec}")
        response = requests.get(spec, timeout=30)
        response.raise_for_status()
        return response.text

    path = Path(spec)
    if not path.exists():
        raise FileNotFoundError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def substitute(template: str, pairs: Sequence[Tuple[str, str]]) -> str:
    """Replace the first occurrence of each marker in ``template``.

    Positions are looked up in the original template, so a value that happens
    to contain another marker is inserted verbatim.
    """
    spans: List[Tuple[int, int, str]] = []
    for marker, value in pairs:
        start = template.find(marker)
        if start == -1:
            continue
        spans.append((start, start + len(marker), value))
    spans.sort()

    parts: List[str] = []
    cursor = 0
    for start, end, value in spans:
        if start < cursor:
            # Overlaps an earlier marker.
            continue
        parts.append(template[cursor:start])
        parts.append(value)
        cursor = end
    parts.append(template[cursor:])
    return "".join(parts)


def fill_template(
    template: str,
    content: str,
    theme: str,
    layout: str,
    width: int,
    height: int,
) -> str:
    return substitute(
        template,
        [
            (CONTENT_MARKER, content),
            (THEME_MARKER, theme),
            (LAYOUT_MARKER, layout),
            (WIDTH_MARKER, str(width)),
            (HEIGHT_MARKER, str(height)),
        ],
    )
