from __future__ import annotations

from pathlib import Path
from typing import Optional

from playwright.sync_api import Browser, Error as PlaywrightError, Page, Playwright
from playwright.sync_api import sync_playwright

from .errors import RenderError

DEFAULT_TIMEOUT_MS = 30_000


class BrowserSession:
    """One headless Chromium page reused for every snapshot of a run.

    Snapshots must be taken one after another: content, viewport and capture
    all act on the same page.
    """

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS, debug: bool = False) -> None:
        self.timeout_ms = timeout_ms
        self.debug = debug
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    def __enter__(self) -> "BrowserSession":
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch()
            self._page = self._browser.new_page()
        except (PlaywrightError, OSError) as exc:
            self.close()
            raise RenderError(f"Unable to launch headless browser: {exc}") from exc
        if self.debug:
            print("[DEBUG] Launched headless Chromium")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        browser, playwright = self._browser, self._playwright
        self._browser = None
        self._page = None
        self._playwright = None
        try:
            if browser is not None:
                browser.close()
        finally:
            if playwright is not None:
                playwright.stop()
                if self.debug:
                    print("[DEBUG] Closed headless Chromium")

    def snapshot(self, html: str, output_path: Path, width: int, height: int) -> None:
        if self._page is None:
            raise RenderError("Browser session is not open.")
        try:
            self._page.set_content(html, wait_until="load", timeout=self.timeout_ms)
            self._page.set_viewport_size({"width": width, "height": height})
            self._page.screenshot(
                path=str(output_path), full_page=True, timeout=self.timeout_ms
            )
        except PlaywrightError as exc:
            raise RenderError(f"Failed to render {output_path}: {exc}") from exc
