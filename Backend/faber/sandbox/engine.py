# faber/sandbox/engine.py
"""
Sandboxed Preview Engine.

Given a file set and a monotonically increasing version, produce exactly
one terminal PreviewSession status.

LIFECYCLE (per session):
1. Tear down the previous session: cancel its timer, drop its subscription,
   close its execution context
2. Create a fresh session and arm its timeout
3. Launch a fresh isolated context in the background
4. Route inbound messages: only the active session's context is heard
5. First READY / ERROR / timeout wins; everything after is ignored
"""
import asyncio
import uuid
from typing import Awaitable, Callable, Dict, Optional, Sequence, Set

from faber.core.config import PreviewSettings
from faber.core.exceptions import SandboxError
from faber.core.logging import log
from faber.core.types import GeneratedFile, MessageType
from faber.lib.monitoring import record_preview_outcome
from faber.sandbox.document import build_preview_document
from faber.sandbox.protocol import ProtocolError, parse_message
from faber.sandbox.runtime import ExecutionContext, IsolatedRuntime
from faber.sandbox.session import PreviewSession
from faber.telemetry.aggregator import TelemetryLog, describe_for_user


StatusCallback = Callable[[PreviewSession], Awaitable[None]]

TIMEOUT_MESSAGE = "Preview timeout - component took too long to load ({ms}ms)"


class PreviewEngine:
    """
    Owns at most one live session at a time.

    All state changes happen on the event loop thread; the runtime's
    listener is invoked there too.
    """

    def __init__(
        self,
        runtime: IsolatedRuntime,
        config: Optional[PreviewSettings] = None,
        telemetry: Optional[TelemetryLog] = None,
        on_status: Optional[StatusCallback] = None,
    ):
        self.runtime = runtime
        self.config = config or PreviewSettings()
        self.telemetry = telemetry or TelemetryLog()
        self.on_status = on_status

        self._active: Optional[PreviewSession] = None
        self._context: Optional[ExecutionContext] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._done: Dict[str, asyncio.Future] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._lock = asyncio.Lock()

    @property
    def active(self) -> Optional[PreviewSession]:
        return self._active

    # ─────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────

    async def load(self, files: Sequence[GeneratedFile], version: int) -> PreviewSession:
        """Start a session for a new source version. Stale versions are ignored."""
        async with self._lock:
            current = self._active
            if current is not None and version <= current.version:
                log("PREVIEW", f"⏭️ Ignoring stale version {version} (current {current.version})")
                return current
            return await self._start(files, version, retry_count=0)

    async def retry(self) -> PreviewSession:
        """Re-run the current source in a brand new context."""
        async with self._lock:
            previous = self._active
            if previous is None:
                raise SandboxError("none", "No preview session to retry")
            return await self._start(previous.source_files, previous.version, previous.retry_count + 1)

    async def wait(self, session: PreviewSession) -> PreviewSession:
        """Suspend until the session is terminal or superseded."""
        done = self._done.get(session.session_id)
        if done is not None:
            await asyncio.shield(done)
        return session

    async def run(self, files: Sequence[GeneratedFile], version: int) -> PreviewSession:
        return await self.wait(await self.load(files, version))

    async def close(self) -> None:
        """Unmount: tear down the live session."""
        async with self._lock:
            await self._teardown()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # ─────────────────────────────────────────────────────────
    # Session lifecycle
    # ─────────────────────────────────────────────────────────

    async def _start(self, files: Sequence[GeneratedFile], version: int, retry_count: int) -> PreviewSession:
        await self._teardown()

        session = PreviewSession(
            session_id=uuid.uuid4().hex,
            version=version,
            source_files=tuple(files),
            retry_count=retry_count,
        )
        loop = asyncio.get_running_loop()
        self._active = session
        self._done[session.session_id] = loop.create_future()

        document = build_preview_document(session.source_files, self.config)
        self._timer = loop.call_later(self.config.timeout_ms / 1000, self._on_timeout, session.session_id)
        self._spawn(self._launch(session, document))

        self.telemetry.info(
            f"Preview session started (version {version}, retry {retry_count})",
            {"sessionId": session.session_id, "files": [f.path for f in session.source_files]},
        )
        log("PREVIEW", f"🎬 Session v{version} started", session_id=session.session_id)
        self._notify(session)
        return session

    async def _launch(self, session: PreviewSession, document: str) -> None:
        try:
            context = await self.runtime.launch(document, session.session_id, self._on_message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self._active is session:
                self._fail(session, f"Failed to start preview runtime: {e}", "resource", {})
            return

        if self._active is not session:
            # Superseded while the context was starting
            await context.close()
            return
        self._context = context

    async def _teardown(self) -> None:
        session = self._active
        if session is None:
            return

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        context, self._context = self._context, None
        self._active = None

        if not session.terminal:
            session.superseded = True
            self.telemetry.info("Preview session superseded", {"sessionId": session.session_id})
        self._release(session)

        if context is not None:
            await context.close()

    # ─────────────────────────────────────────────────────────
    # Inbound messages
    # ─────────────────────────────────────────────────────────

    def _on_message(self, context_id: str, raw) -> None:
        session = self._active
        if session is None or context_id != session.session_id:
            log("PROTOCOL", f"Dropped message from inactive context {context_id[:8]}")
            return
        if session.terminal:
            return

        try:
            message = parse_message(raw)
        except ProtocolError as e:
            self.telemetry.debug(f"Malformed boundary message dropped: {e}", source="sandbox")
            return

        payload = message.payload
        if message.type == MessageType.LOAD_START:
            session.mark_load_started()
            self.telemetry.debug("Sandbox started loading", source="sandbox")
        elif message.type == MessageType.DEBUG:
            self.telemetry.debug(
                payload["message"],
                {"debugType": payload["debugType"], "data": payload["data"]},
                source="sandbox",
            )
        elif message.type == MessageType.READY:
            self._succeed(session, payload["loadTimeMs"])
        elif message.type == MessageType.ERROR:
            self._fail(session, payload["error"], payload["kind"], payload["details"])

    def _on_timeout(self, session_id: str) -> None:
        session = self._active
        if session is None or session.session_id != session_id:
            return
        self._fail(session, TIMEOUT_MESSAGE.format(ms=self.config.timeout_ms), "timeout", {})

    # ─────────────────────────────────────────────────────────
    # Terminal transitions
    # ─────────────────────────────────────────────────────────

    def _succeed(self, session: PreviewSession, load_time_ms: Optional[float]) -> None:
        if not session.succeed(load_time_ms):
            return
        self._finish(session)
        self.telemetry.info(f"Preview ready in {session.load_time_ms}ms", {"sessionId": session.session_id})
        log("PREVIEW", f"✅ Ready in {session.load_time_ms}ms", session_id=session.session_id)

    def _fail(self, session: PreviewSession, message: str, kind: str, details: dict) -> None:
        if not session.fail(message, kind, details):
            return
        self._finish(session)
        self.telemetry.error(
            message,
            {"sessionId": session.session_id, "kind": kind, "hint": describe_for_user(kind), **details},
            source="sandbox",
        )
        log("PREVIEW", f"❌ {kind}: {message}", session_id=session.session_id)

    def _finish(self, session: PreviewSession) -> None:
        if self._timer is not None and self._active is session:
            self._timer.cancel()
            self._timer = None
        record_preview_outcome(session.status.value, session.error_kind or "none")
        self._release(session)
        self._notify(session)

    def _release(self, session: PreviewSession) -> None:
        done = self._done.pop(session.session_id, None)
        if done is not None and not done.done():
            done.set_result(session)

    # ─────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────

    def _spawn(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _notify(self, session: PreviewSession) -> None:
        if self.on_status is not None:
            self._spawn(self.on_status(session))
