from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image


class FakeSession:
    """Stands in for the headless browser by writing a blank PNG per snapshot."""

    instances: list["FakeSession"] = []

    def __init__(self, timeout_ms: int | None = None, debug: bool = False, fail_on_call: int | None = None) -> None:
        self.timeout_ms = timeout_ms
        self.debug = debug
        self.fail_on_call = fail_on_call
        self.calls: list[tuple[str, Path, int, int]] = []
        self.entered = False
        self.closed = False
        FakeSession.instances.append(self)

    def __enter__(self) -> "FakeSession":
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def snapshot(self, html: str, output_path: Path, width: int, height: int) -> None:
        self.calls.append((html, Path(output_path), width, height))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            from mdsocial.errors import RenderError

            raise RenderError(f"Failed to render {output_path}: boom")
        Image.new("RGB", (width, height), "white").save(output_path)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def patched_browser(monkeypatch):
    from mdsocial import md_to_pages

    FakeSession.instances = []
    monkeypatch.setattr(md_to_pages, "BrowserSession", FakeSession)
    return FakeSession


@pytest.fixture
def article() -> str:
    return "---\ntitle: Hello\nauthor: Jane\n---\n\n" + "Word " * 100
