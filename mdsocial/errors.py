from __future__ import annotations


class MdSocialError(Exception):
    """Base class for errors raised while turning an article into pages."""


class MissingMetadataError(MdSocialError, ValueError):
    pass


class UnknownLayoutError(MdSocialError, ValueError):
    pass


class RenderError(MdSocialError, RuntimeError):
    """The headless browser failed to load or capture a page."""
