from __future__ import annotations

from pathlib import Path

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from mdsocial import renderer
from mdsocial.errors import RenderError
from mdsocial.renderer import BrowserSession


class RecordingPage:
    def __init__(self, log: list, fail_on: str | None = None, error: Exception | None = None) -> None:
        self.log = log
        self.fail_on = fail_on
        self.error = error

    def _record(self, name: str, *args, **kwargs) -> None:
        self.log.append((name, args, kwargs))
        if name == self.fail_on:
            raise self.error

    def set_content(self, html, **kwargs) -> None:
        self._record("set_content", html, **kwargs)

    def set_viewport_size(self, size) -> None:
        self._record("set_viewport_size", size)

    def screenshot(self, **kwargs) -> None:
        self._record("screenshot", **kwargs)


class RecordingBrowser:
    def __init__(self, driver: "RecordingDriver") -> None:
        self.driver = driver

    def new_page(self) -> RecordingPage:
        self.driver.log.append(("new_page", (), {}))
        if self.driver.fail_new_page:
            raise PlaywrightError("page crashed")
        return self.driver.page

    def close(self) -> None:
        self.driver.log.append(("browser.close", (), {}))
        if self.driver.fail_browser_close:
            raise PlaywrightError("browser already gone")


class RecordingChromium:
    def __init__(self, driver: "RecordingDriver") -> None:
        self.driver = driver

    def launch(self) -> RecordingBrowser:
        self.driver.log.append(("launch", (), {}))
        return RecordingBrowser(self.driver)


class RecordingDriver:
    """Replacement for the object returned by ``sync_playwright().start()``."""

    def __init__(self) -> None:
        self.log: list = []
        self.page = RecordingPage(self.log)
        self.chromium = RecordingChromium(self)
        self.fail_start = False
        self.fail_new_page = False
        self.fail_browser_close = False
        self.stopped = False

    def start(self) -> "RecordingDriver":
        if self.fail_start:
            raise PlaywrightError("driver executable missing")
        self.log.append(("start", (), {}))
        return self

    def stop(self) -> None:
        self.log.append(("stop", (), {}))
        self.stopped = True


@pytest.fixture
def driver(monkeypatch) -> RecordingDriver:
    instance = RecordingDriver()
    monkeypatch.setattr(renderer, "sync_playwright", lambda: instance)
    return instance


def names(driver: RecordingDriver) -> list:
    return [entry[0] for entry in driver.log]


def test_snapshot_loads_sizes_then_captures(driver: RecordingDriver, tmp_path: Path) -> None:
    target = tmp_path / "post-1-1080x1920.png"
    with BrowserSession(timeout_ms=1234) as session:
        session.snapshot("<p>Hi</p>", target, 1080, 1920)

    assert names(driver) == [
        "start",
        "launch",
        "new_page",
        "set_content",
        "set_viewport_size",
        "screenshot",
        "browser.close",
        "stop",
    ]
    log = {entry[0]: entry for entry in driver.log}
    assert log["set_content"][1] == ("<p>Hi</p>",)
    assert log["set_content"][2] == {"wait_until": "load", "timeout": 1234}
    assert log["set_viewport_size"][1] == ({"width": 1080, "height": 1920},)
    assert log["screenshot"][2] == {"path": str(target), "full_page": True, "timeout": 1234}


def test_default_timeout(driver: RecordingDriver, tmp_path: Path) -> None:
    with BrowserSession() as session:
        session.snapshot("<p>Hi</p>", tmp_path / "a.png", 10, 10)
    assert driver.log[3][2]["timeout"] == renderer.DEFAULT_TIMEOUT_MS


@pytest.mark.parametrize(
    "fail_on, error",
    [
        ("set_content", PlaywrightTimeoutError("Timeout 30000ms exceeded")),
        ("screenshot", PlaywrightError("Target closed")),
    ],
)
def test_playwright_failures_become_render_errors(
    driver: RecordingDriver, tmp_path: Path, fail_on: str, error: Exception
) -> None:
    driver.page.fail_on = fail_on
    driver.page.error = error
    with pytest.raises(RenderError) as exc:
        with BrowserSession() as session:
            session.snapshot("<p>Hi</p>", tmp_path / "a.png", 10, 10)
    assert exc.value.__cause__ is error
    assert driver.stopped
    assert names(driver)[-2:] == ["browser.close", "stop"]


def test_teardown_when_body_raises(driver: RecordingDriver) -> None:
    with pytest.raises(KeyError):
        with BrowserSession():
            raise KeyError("boom")
    assert names(driver)[-2:] == ["browser.close", "stop"]


def test_driver_stopped_when_browser_close_fails(driver: RecordingDriver) -> None:
    driver.fail_browser_close = True
    session = BrowserSession()
    with pytest.raises(PlaywrightError):
        with session:
            pass
    assert driver.stopped
    assert session._browser is None and session._page is None and session._playwright is None


def test_driver_start_failure_is_a_render_error(driver: RecordingDriver) -> None:
    driver.fail_start = True
    with pytest.raises(RenderError):
        with BrowserSession():
            pass
    assert driver.log == []


def test_launch_failure_stops_driver(driver: RecordingDriver) -> None:
    driver.fail_new_page = True
    with pytest.raises(RenderError):
        with BrowserSession():
            pass
    assert names(driver)[-2:] == ["browser.close", "stop"]


def test_snapshot_requires_open_session(tmp_path: Path) -> None:
    with pytest.raises(RenderError):
        BrowserSession().snapshot("<p>Hi</p>", tmp_path / "a.png", 10, 10)
