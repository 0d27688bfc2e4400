"""Hand-written fakes for the probe, capture workers and Playwright objects."""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from url_snapshot.capture_page import SERIALIZE_HTML_JS
from url_snapshot.models import CaptureResult, DocumentArtifacts, PageArtifacts


class FakeProbe:
    """Content probe answering from a fixed URL -> content-type mapping."""

    def __init__(self, types: Dict[str, str]) -> None:
        self.types = types
        self.calls: List[str] = []

    def content_type(self, url: str) -> str:
        self.calls.append(url)
        return self.types.get(url, "")


class FakeCapturer:
    """Capture worker returning canned results and recording its calls."""

    def __init__(
        self,
        make_result: Optional[Callable[[str, str], CaptureResult]] = None,
        on_call: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.make_result = make_result
        self.on_call = on_call
        self.calls: List[str] = []

    def capture(self, url: str, fp: str) -> CaptureResult:
        self.calls.append(url)
        if self.on_call is not None:
            self.on_call(url)
        if self.make_result is not None:
            return self.make_result(url, fp)
        return CaptureResult.success(
            PageArtifacts(screenshot=f"{fp}.png", html=f"{fp}.html", text=f"{fp}.txt")
        )


def document_result(url: str, fp: str) -> CaptureResult:
    return CaptureResult.success(DocumentArtifacts(document=f"{fp}.pdf", text=f"{fp}.txt"))


class FakeHandle:
    """Stand-in for the JSHandle returned by wait_for_function."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def json_value(self) -> Any:
        return self.value


class FakePage:
    """Stand-in for a Playwright page."""

    def __init__(
        self,
        html: str = "<html><body><p>Hello</p></body></html>",
        text: str = "Hello",
        goto: Optional[Callable[[str], None]] = None,
        script_seconds: float = 0.0,
        clock: Optional[Any] = None,
    ) -> None:
        self.html = html
        self.text = text
        self._goto = goto
        self.script_seconds = script_seconds
        self.clock = clock
        self.script_timeouts: List[float] = []
        self.closed = False
        self.visited: List[str] = []
        self.default_timeout: Optional[float] = None

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    def goto(self, url: str, wait_until: str = "load", timeout: Optional[float] = None) -> None:
        assert wait_until == "domcontentloaded"
        self.visited.append(url)
        if self._goto is not None:
            self._goto(url)

    def screenshot(self, path: str, full_page: bool = False, timeout: Optional[float] = None) -> bytes:
        data = b"\x89PNG fake"
        Path(path).write_bytes(data)
        return data

    def wait_for_function(self, expression: str, timeout: Optional[float] = None) -> FakeHandle:
        """Runs for ``script_seconds``; gives up like Playwright once ``timeout`` ms pass."""
        self.script_timeouts.append(timeout)
        if timeout is not None and self.script_seconds * 1000 > timeout:
            if self.clock is not None:
                self.clock.now += timeout / 1000
            raise PlaywrightTimeoutError(f"Timeout {timeout:.0f}ms exceeded.")
        if self.clock is not None:
            self.clock.now += self.script_seconds
        value = self.html if expression == SERIALIZE_HTML_JS else self.text
        return FakeHandle({"value": value})

    def close(self) -> None:
        self.closed = True


class FakeContext:
    """Stand-in for a Playwright browser context handing out one page."""

    def __init__(self, page: Optional[FakePage] = None) -> None:
        self.page = page or FakePage()
        self.pages_opened = 0

    def new_page(self) -> FakePage:
        self.pages_opened += 1
        return self.page
