"""
Turn a Markdown article into a metadata card, word-bounded content cards and a
closing card, rendered to PNG by a headless browser.

The command-line entry point is :func:`main`; the text preparation lives in
:mod:`mdsocial.text_utils` and the page pipeline in :mod:`mdsocial.md_to_pages`.
"""

from .cli import main

__all__ = ["main"]
