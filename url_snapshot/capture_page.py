"""Page capture: render a web page under a deadline and save its artifacts."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List

from playwright.sync_api import BrowserContext, Page
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from .config import Settings
from .errors import NavigationError, NavigationTimeout
from .models import CaptureResult, PageArtifacts

logger = logging.getLogger(__name__)

# These run through wait_for_function, which takes a timeout where evaluate()
# and content() do not. Each returns an object so empty output is still truthy.

# Doctype plus the serialised document element.
SERIALIZE_HTML_JS = """
() => {
  let html = '';
  if (document.doctype) html = new XMLSerializer().serializeToString(document.doctype);
  if (document.documentElement) html += document.documentElement.outerHTML;
  return { value: html };
}
"""

# Drops script/style nodes, then keeps the non-empty trimmed lines of the
# rendered body text in document order.
EXTRACT_TEXT_JS = """
() => {
  document.querySelectorAll('script, style').forEach((el) => el.remove());
  const text = document.body.innerText
    .split('\\n')
    .map((line) => line.trim())
    .filter((line) => line)
    .join('\\n');
  return { value: text };
}
"""


@dataclass(frozen=True)
class PagePaths:
    screenshot: Path
    html: Path
    text: Path

    def all_exist(self) -> bool:
        return self.screenshot.exists() and self.html.exists() and self.text.exists()

    def artifacts(self) -> PageArtifacts:
        return PageArtifacts(
            screenshot=self.screenshot.name, html=self.html.name, text=self.text.name
        )


class Deadline:
    """Fixed time budget shared by every step of a page capture."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._expires = clock() + seconds

    def remaining_ms(self) -> float:
        """Milliseconds left; raises NavigationTimeout once the budget is spent."""
        remaining = (self._expires - self._clock()) * 1000
        if remaining <= 0:
            raise NavigationTimeout()
        return remaining

    def check(self) -> None:
        self.remaining_ms()


class PageCapturer:
    def __init__(
        self,
        context: BrowserContext,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.context = context
        self.settings = settings
        self._clock = clock

    def artifact_paths(self, fp: str) -> PagePaths:
        return PagePaths(
            screenshot=self.settings.screenshots_path / f"{fp}.png",
            html=self.settings.html_path / f"{fp}.html",
            text=self.settings.text_path / f"{fp}.txt",
        )

    def _render(self, page: Page, url: str, paths: PagePaths) -> None:
        deadline = Deadline(self.settings.navigation_timeout, self._clock)
        page.set_default_timeout(deadline.remaining_ms())
        page.goto(url, wait_until="domcontentloaded", timeout=deadline.remaining_ms())
        page.screenshot(path=str(paths.screenshot), full_page=True, timeout=deadline.remaining_ms())

        html = _run_script(page, SERIALIZE_HTML_JS, deadline)
        text = _run_script(page, EXTRACT_TEXT_JS, deadline)
        deadline.check()

        paths.html.write_text(html, encoding="utf-8")
        paths.text.write_text(text, encoding="utf-8")

    def capture(self, url: str, fp: str) -> CaptureResult:
        """Render ``url`` and write screenshot, HTML and text artifacts.

        If all three artifacts are already on disk the page is not rendered
        again. The page is always closed, whatever the outcome.
        """
        paths = self.artifact_paths(fp)
        if paths.all_exist():
            logger.info("Files already exist for %s, skipping render", url)
            return CaptureResult.success(paths.artifacts())

        page = self.context.new_page()
        try:
            self._render(page, url, paths)
        except (NavigationTimeout, PlaywrightTimeoutError):
            logger.warning("Timeout occurred while processing %s", url)
            return CaptureResult.failed(NavigationTimeout())
        except PlaywrightError as exc:
            return CaptureResult.failed(NavigationError(exc.message))
        finally:
            _close_quietly(page)

        return CaptureResult.success(paths.artifacts())


def _run_script(page: Page, script: str, deadline: Deadline) -> str:
    handle = page.wait_for_function(script, timeout=deadline.remaining_ms())
    return handle.json_value()["value"]


def _close_quietly(page: Page) -> None:
    try:
        page.close()
    except PlaywrightError as exc:
        logger.warning("Error closing page: %s", exc)


def _launch_args(settings: Settings) -> List[str]:
    if settings.extension_dir is None:
        return []
    ext = settings.extension_dir.resolve()
    return [f"--disable-extensions-except={ext}", f"--load-extension={ext}"]


@contextmanager
def open_browser_context(settings: Settings) -> Iterator[BrowserContext]:
    """Launch the shared persistent Chromium context for the whole run.

    Signal handling is left to the shutdown coordinator, so Playwright is told
    not to tear the browser down on SIGINT/SIGTERM itself.
    """
    logger.info("Launching browser (profile: %s)", settings.profile_path)
    with sync_playwright() as pw:
        context = pw.chromium.launch_persistent_context(
            str(settings.profile_path),
            headless=settings.headless,
            args=_launch_args(settings),
            handle_sigint=False,
            handle_sigterm=False,
        )
        logger.info("Browser launched successfully")
        try:
            yield context
        finally:
            try:
                context.close()
            except PlaywrightError as exc:
                logger.warning("Error closing browser: %s", exc)
            else:
                logger.info("Browser closed")
