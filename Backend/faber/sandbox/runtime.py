# faber/sandbox/runtime.py
"""
Isolated execution runtimes for preview documents.

The engine only sees two operations:
    launch(document, context_id, listener) -> ExecutionContext
    ExecutionContext.close()

Everything a page says reaches the host through `listener(context_id, message)`.
The host never evaluates script inside the page.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
from urllib.parse import urlparse

from playwright.async_api import async_playwright, Error as PlaywrightError

from faber.core.config import PreviewSettings
from faber.core.logging import log
from faber.sandbox.document import HOST_BINDING


MessageListener = Callable[[str, Any], None]


class ExecutionContext(ABC):
    """Handle for one isolated page. Used only for teardown."""

    def __init__(self, context_id: str):
        self.context_id = context_id

    @abstractmethod
    async def close(self) -> None:
        ...


class IsolatedRuntime(ABC):
    """Creates a fresh, isolated execution context per preview session."""

    @abstractmethod
    async def launch(self, document: str, context_id: str, listener: MessageListener) -> ExecutionContext:
        ...

    async def shutdown(self) -> None:
        pass


# ═══════════════════════════════════════════════════════════════════════════════
# PLAYWRIGHT (headless Chromium)
# ═══════════════════════════════════════════════════════════════════════════════

class PlaywrightContext(ExecutionContext):
    def __init__(self, context_id: str, browser_context):
        super().__init__(context_id)
        self._browser_context = browser_context

    async def close(self) -> None:
        try:
            await self._browser_context.close()
        except PlaywrightError as e:
            # Browser already gone; nothing left to release
            log("SANDBOX", f"⚠️ Context close failed: {e}", session_id=self.context_id)


class PlaywrightRuntime(IsolatedRuntime):
    """
    One shared Chromium process; one new browser context per session.

    Capabilities inside a context:
    - scripts run
    - subresources load only from `allowed_hosts`
    - every navigation (top-level or frame) is aborted
    - popups are closed as soon as they open
    - service workers and downloads are blocked
    """

    def __init__(self, config: Optional[PreviewSettings] = None):
        self.config = config or PreviewSettings()
        self._playwright = None
        self._browser = None
        self._lock = asyncio.Lock()

    async def _ensure_browser(self):
        async with self._lock:
            if self._browser is None or not self._browser.is_connected():
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
                log("SANDBOX", "🌐 Chromium launched for previews")
            return self._browser

    def _host_allowed(self, url: str) -> bool:
        if url.startswith(("data:", "blob:", "about:")):
            return True
        host = urlparse(url).hostname or ""
        return any(host == allowed or host.endswith("." + allowed) for allowed in self.config.allowed_hosts)

    async def _guard_request(self, route) -> None:
        request = route.request
        if request.is_navigation_request() or not self._host_allowed(request.url):
            log("SANDBOX", f"🚫 Blocked {request.resource_type} request: {request.url[:120]}")
            await route.abort("blockedbyclient")
            return
        await route.continue_()

    async def launch(self, document: str, context_id: str, listener: MessageListener) -> ExecutionContext:
        browser = await self._ensure_browser()
        browser_context = await browser.new_context(service_workers="block", accept_downloads=False)
        try:
            await browser_context.route("**/*", self._guard_request)
            page = await browser_context.new_page()
            page.on("popup", lambda popup: asyncio.ensure_future(popup.close()))
            await page.expose_binding(HOST_BINDING, lambda source, message: listener(context_id, message))
            await page.set_content(document, wait_until="commit")
        except Exception:
            await browser_context.close()
            raise

        log("SANDBOX", "📦 Preview context created", session_id=context_id)
        return PlaywrightContext(context_id, browser_context)

    async def shutdown(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
