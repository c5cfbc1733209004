"""
Text preparation for social-media pages: metadata parsing, word-bounded
chunking and rendering of the metadata card.
"""

from __future__ import annotations

import html
import re
from typing import Dict, List, Mapping, Optional

DEFAULT_WORD_LIMIT = 72
DEFAULT_CHUNK_LIMIT = 10
READ_MORE_MESSAGE = "Read the full article on my blog. Link in bio."
CONTINUATION_PREFIX = "... "
CONTINUATION_SUFFIX = " ..."
METADATA_BLOCK_PATTERN = re.compile(r"---[\s\S]+?---")
METADATA_CAPTURE_PATTERN = re.compile(r"---\s*([\s\S]+?)\s*---")


def parse_meta(text: str) -> Optional[Dict[str, str]]:
    """Return the key/value pairs of the first ``---`` block, or None."""
    match = METADATA_CAPTURE_PATTERN.search(text)
    if not match:
        return None

    meta: Dict[str, str] = {}
    for line in match.group(1).split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if key and value:
            meta[key.lower()] = value
    return meta


def _paragraph_stream(text: str) -> List[str]:
    text = METADATA_BLOCK_PATTERN.sub("", text, count=1)
    lines = text.split("\n")

    if lines[0].strip() == "":
        lines.pop(0)

    first_non_empty = next(
        (index for index, line in enumerate(lines) if line.strip()), None
    )
    if first_non_empty is None:
        return []

    paragraphs: List[str] = []
    for line in lines[first_non_empty:]:
        # Keep a single blank line between paragraphs.
        if not line.strip() and paragraphs and not paragraphs[-1].strip():
            continue
        paragraphs.append(line)
    return paragraphs


def _window_paragraph(words: List[str], word_limit: int) -> List[str]:
    windows: List[str] = []
    for start in range(0, len(words), word_limit):
        chunk = " ".join(words[start : start + word_limit])
        if start + word_limit < len(words):
            chunk += CONTINUATION_SUFFIX
        if start > 0:
            chunk = CONTINUATION_PREFIX + chunk
        windows.append(chunk)
    return windows


def split_text_into_chunks(
    text: str,
    word_limit: int = DEFAULT_WORD_LIMIT,
    limit: int = DEFAULT_CHUNK_LIMIT,
) -> List[str]:
    """Split the article body into chunks of at most ``word_limit`` words.

    The metadata block is dropped first. Every line of the remaining text is
    windowed on its own; a window that continues a line starts with ``"... "``
    and a window that is continued ends with ``" ..."``. Once ``limit`` chunks
    exist the last one is replaced by :data:`READ_MORE_MESSAGE` and the rest of
    the text is ignored.
    """
    if word_limit < 1:
        raise ValueError(f"word_limit must be a positive integer, got {word_limit}")
    if limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit}")

    chunks: List[str] = []
    for paragraph in _paragraph_stream(text):
        for chunk in _window_paragraph(paragraph.split(), word_limit):
            chunks.append(chunk)
            if len(chunks) >= limit:
                chunks[-1] = READ_MORE_MESSAGE
                return chunks
    return chunks


def generate_meta_content(meta: Mapping[str, str], escape: bool = False) -> str:
    """Render metadata as one ``property--<key>`` div per entry.

    Values are inserted as raw HTML unless ``escape`` is set.
    """
    blocks = []
    for key, value in meta.items():
        if escape:
            value = html.escape(value)
        blocks.append(f'<div class="property property--{key}">{value}</div>')
    return f"<div class='properties'>{''.join(blocks)}</div>"
