"""
External Resource Opener - opens destinations in real browser windows.

The automation core never talks to a browser directly. It asks a
ResourceOpener to open a URL (or a VideoSearchDescriptor) under a logical
window name and gets back an opaque handle, or None when the open failed.
The window registry later uses the same opener to ask whether the handle
is closed, to focus it, navigate it, close it, or drive its media.

Design Pattern: Strategy Pattern
================================
- ResourceOpener: abstract contract used by handlers and the registry
- PlaywrightOpener: Chromium via Playwright's async API (one page per window)

Tests inject a fake opener; nothing else in the core imports Playwright.
"""

import asyncio
import logging
import webbrowser
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from voicepilot.core.config import settings
from voicepilot.ai.intent.destinations import Destination, VideoSearchDescriptor, destination_url

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Page, Playwright

logger = logging.getLogger("voicepilot.environments.browser")


# ---------------------------------------------------------------------------
# OPENER CONTRACT
# ---------------------------------------------------------------------------

class ResourceOpener(ABC):
    """
    Abstract contract for anything that can open external destinations.

    Failure modes:
    - open() returns None when the destination could not be opened
      (blocked, browser unavailable). It does not raise for that.
    - is_closed() may raise when the handle cannot be inspected;
      callers treat that as "unknown, assume open".
    """

    @abstractmethod
    async def open(self, destination: Destination, logical_name: str) -> Optional[Any]:
        """Open a destination; returns a handle, or None on failure."""
        pass

    @abstractmethod
    def is_closed(self, handle: Any) -> bool:
        pass

    @abstractmethod
    async def close(self, handle: Any) -> None:
        pass

    @abstractmethod
    async def focus(self, handle: Any) -> None:
        pass

    @abstractmethod
    async def navigate(self, handle: Any, url: str) -> None:
        pass

    @abstractmethod
    async def send_media_action(self, handle: Any, action: str) -> bool:
        """Apply a media action inside the window. Best-effort, returns whether it ran."""
        pass

    async def has_focus(self, handle: Any) -> Optional[bool]:
        """Whether the window has focus, or None when that cannot be read."""
        return None

    async def shutdown(self) -> None:
        """Release browser resources. Optional."""
        return None


# ---------------------------------------------------------------------------
# HANDLES
# ---------------------------------------------------------------------------

@dataclass
class ExternalHandoff:
    """
    Handle for URLs passed to the operating system (tel:, mailto:).

    The OS owns whatever it opened, so the handle reports itself closed
    immediately and close/focus/navigate are no-ops.
    """
    url: str
    logical_name: str


# In-page media script. Drives every <video>/<audio> element on the page.
_MEDIA_SCRIPT = """
(action) => {
    const media = Array.from(document.querySelectorAll('video, audio'));
    media.forEach((el) => {
        switch (action) {
            case 'pause':
                el.pause();
                break;
            case 'stop':
                el.pause();
                el.currentTime = 0;
                break;
            case 'resume':
                el.play();
                break;
            case 'volume_up':
                el.volume = Math.min(1, el.volume + 0.1);
                break;
            case 'volume_down':
                el.volume = Math.max(0, el.volume - 0.1);
                break;
            case 'mute':
                el.muted = !el.muted;
                break;
        }
    });
    return media.length;
}
"""

# Keyboard shortcuts for actions that have no media-element equivalent
_MEDIA_SHORTCUTS = {
    "next": "Shift+N",
    "previous": "Shift+P",
}

# First-result selectors on a YouTube search page, most specific first
_VIDEO_RESULT_SELECTORS = (
    "ytd-video-renderer a#video-title",
    "ytd-rich-item-renderer a#video-title",
    "a#video-title",
    "ytd-thumbnail a",
)


# ---------------------------------------------------------------------------
# PLAYWRIGHT OPENER
# ---------------------------------------------------------------------------

class PlaywrightOpener(ResourceOpener):
    """
    Opens destinations as pages of a shared Chromium context.

    Chromium is launched lazily on the first open() so importing the
    module (and running tests) never needs a browser.

    Responsibilities:
    - Launch and own the browser, context and pages
    - Hand non-http URLs (tel:) to the operating system
    - Follow up search descriptors with best-effort clicks on the first result
    """

    def __init__(
        self,
        headless: Optional[bool] = None,
        viewport_width: Optional[int] = None,
        viewport_height: Optional[int] = None,
        auto_click_attempts: Optional[int] = None,
        auto_click_delay: float = 1.0,
    ):
        self.headless = settings.BROWSER_HEADLESS if headless is None else headless
        self.viewport = {
            "width": viewport_width or settings.BROWSER_VIEWPORT_WIDTH,
            "height": viewport_height or settings.BROWSER_VIEWPORT_HEIGHT,
        }
        self.auto_click_attempts = auto_click_attempts or settings.AUTO_CLICK_MAX_ATTEMPTS
        self.auto_click_delay = auto_click_delay

        self._playwright: Optional["Playwright"] = None
        self._browser: Optional["Browser"] = None
        self._context: Optional["BrowserContext"] = None
        self._launch_lock = asyncio.Lock()
        self._follow_ups: set = set()

    async def _ensure_context(self) -> "BrowserContext":
        async with self._launch_lock:
            if self._context is None:
                from playwright.async_api import async_playwright

                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(headless=self.headless)
                self._context = await self._browser.new_context(viewport=self.viewport)
                logger.info(f"Chromium launched (headless={self.headless})")
        return self._context

    async def open(self, destination: Destination, logical_name: str) -> Optional[Any]:
        url = destination_url(destination)

        if not url.startswith(("http://", "https://")):
            return await self._hand_off(url, logical_name)

        from playwright.async_api import Error as PlaywrightError

        page = None
        try:
            context = await self._ensure_context()
            page = await context.new_page()
            await page.goto(url, wait_until="domcontentloaded")
            await page.bring_to_front()
        except PlaywrightError as e:
            logger.warning(f"Failed to open {logical_name} ({url}): {e}")
            if page is not None:
                await self._discard(page)
            return None

        logger.info(f"Opened {logical_name}: {url}")

        if isinstance(destination, VideoSearchDescriptor) and destination.needs_auto_click:
            task = asyncio.create_task(self._auto_click_first_result(page, destination.query))
            self._follow_ups.add(task)
            task.add_done_callback(self._follow_ups.discard)

        return page

    async def _discard(self, page: "Page") -> None:
        """Close a page that was never handed out."""
        from playwright.async_api import Error as PlaywrightError

        try:
            await page.close()
        except PlaywrightError as e:
            logger.debug(f"Closing abandoned page failed: {e}")

    async def _hand_off(self, url: str, logical_name: str) -> Optional[ExternalHandoff]:
        opened = await asyncio.to_thread(webbrowser.open, url)
        if not opened:
            logger.warning(f"No system handler accepted {url}")
            return None
        logger.info(f"Handed {logical_name} to the system: {url}")
        return ExternalHandoff(url=url, logical_name=logical_name)

    async def _auto_click_first_result(self, page: "Page", query: str) -> bool:
        """Try to start the first video on a search page. Never raises."""
        from playwright.async_api import Error as PlaywrightError

        for attempt in range(1, self.auto_click_attempts + 1):
            await asyncio.sleep(self.auto_click_delay * attempt)
            if page.is_closed():
                return False
            for selector in _VIDEO_RESULT_SELECTORS:
                try:
                    link = page.locator(selector).first
                    if await link.count() == 0:
                        continue
                    await link.click(timeout=2000)
                    logger.info(f"Auto-clicked first result for '{query}' (attempt {attempt})")
                    return True
                except PlaywrightError as e:
                    logger.debug(f"Auto-click attempt {attempt} with {selector} failed: {e}")

        logger.info(f"Auto-click gave up for '{query}' after {self.auto_click_attempts} attempts")
        return False

    def is_closed(self, handle: Any) -> bool:
        if isinstance(handle, ExternalHandoff):
            return True
        return handle.is_closed()

    async def close(self, handle: Any) -> None:
        if isinstance(handle, ExternalHandoff):
            return
        await handle.close()

    async def focus(self, handle: Any) -> None:
        if isinstance(handle, ExternalHandoff):
            return
        await handle.bring_to_front()

    async def navigate(self, handle: Any, url: str) -> None:
        if isinstance(handle, ExternalHandoff):
            return
        await handle.goto(url, wait_until="domcontentloaded")

    async def send_media_action(self, handle: Any, action: str) -> bool:
        if isinstance(handle, ExternalHandoff):
            return False

        from playwright.async_api import Error as PlaywrightError

        try:
            shortcut = _MEDIA_SHORTCUTS.get(action)
            if shortcut:
                await handle.keyboard.press(shortcut)
                return True
            count = await handle.evaluate(_MEDIA_SCRIPT, action)
            return bool(count)
        except PlaywrightError as e:
            logger.debug(f"Media action '{action}' failed in page: {e}")
            return False

    async def has_focus(self, handle: Any) -> Optional[bool]:
        if isinstance(handle, ExternalHandoff):
            return False

        from playwright.async_api import Error as PlaywrightError

        try:
            return bool(await handle.evaluate("document.hasFocus()"))
        except PlaywrightError as e:
            logger.debug(f"Cannot read focus of page: {e}")
            return None

    async def shutdown(self) -> None:
        for task in list(self._follow_ups):
            task.cancel()
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
        if self._playwright is not None:
            await self._playwright.stop()
        self._browser = None
        self._context = None
        self._playwright = None
