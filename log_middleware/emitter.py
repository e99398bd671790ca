"""Fire-and-forget log emitter for the remote logging API.

One LogEmitter is constructed at startup and passed to every caller.
Each emit() call:

    NORMALIZE -> TRACE -> MAP -> VALIDATE -> (ABORT | SEND -> REPORT)

The first four steps run synchronously in the caller. SEND runs detached
(an asyncio task when an event loop is running, a worker thread
otherwise), so the caller never waits for, nor sees the outcome of, the
network call. Every failure is reported once to the local trace sink.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Dict, Optional, Set

import httpx

from .errors import RecordValidationError, RemoteRejected, TransportFault
from .records import DEFAULT_STACK, RemoteLogRecord, build_record, normalize_level
from .trace import LoggingTraceSink, TraceSink, trace_intent


logger = logging.getLogger(__name__)

TRACE_PREFIX = "[Logging Middleware]"


class LogEmitter:
    """Sends log records to the remote logging API without blocking callers."""

    def __init__(
        self,
        endpoint_url: str,
        *,
        trace: Optional[TraceSink] = None,
        timeout: float = 5.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        default_stack: str = DEFAULT_STACK,
        max_workers: int = 4,
    ):
        """Initialize log emitter.

        Args:
            endpoint_url: Remote logging endpoint (POST)
            trace: Local trace sink (defaults to a LoggingTraceSink)
            timeout: Per-request timeout in seconds
            headers: Extra request headers, e.g. Authorization
            transport: Optional httpx transport (used by tests)
            default_stack: Stack used when the caller passes none
            max_workers: Worker threads for emits made outside an event loop
        """
        self.endpoint_url = endpoint_url
        self.trace = trace or LoggingTraceSink()
        self.timeout = timeout
        self.headers = {**(headers or {}), "Content-Type": "application/json"}
        self.transport = transport
        self.default_stack = default_stack
        self.max_workers = max_workers

        self._tasks: Set[asyncio.Task] = set()
        self._futures: Set[Future] = set()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        with self._lock:
            futures = sum(1 for future in self._futures if not future.done())
        return futures + sum(1 for task in self._tasks if not task.done())

    def emit(self, stack: Any, level: Any, package_name: Any, message: Any) -> None:
        """Log locally and send to the remote API in the background.

        Never raises and never waits for the network.

        Args:
            stack: "backend" or "frontend" (any case); None or "" means default
            level: DEBUG, INFO, WARN, ERROR, FATAL or SUCCESS (any case); None means INFO
            package_name: Emitting module
            message: Log message
        """
        record = self.prepare(stack, level, package_name, message)
        if record is not None:
            self._dispatch(record)

    async def log(self, stack: Any, level: Any, package_name: Any, message: Any) -> None:
        """Same as emit(), but resolves once delivery has been attempted.

        Never raises.
        """
        record = self.prepare(stack, level, package_name, message)
        if record is not None:
            await self.deliver(record)

    def prepare(
        self,
        stack: Any,
        level: Any,
        package_name: Any,
        message: Any,
    ) -> Optional[RemoteLogRecord]:
        """Trace the intent locally and build the remote record.

        Returns:
            RemoteLogRecord, or None when validation failed (already traced)
        """
        normalized = normalize_level(level)

        try:
            trace_intent(self.trace, normalized, stack, package_name, message)
        except Exception as e:
            logger.error(f"Trace sink failed: {e}")

        try:
            return build_record(stack, level, package_name, message, self.default_stack)
        except RecordValidationError as e:
            self._trace_error(e.message)
            return None

    async def deliver(self, record: RemoteLogRecord) -> None:
        """Make exactly one delivery attempt, tracing any failure."""
        try:
            await self._send(record)
        except RemoteRejected as e:
            if e.body is None:
                self._trace_error(e.message)
            else:
                self._trace_error(e.message, {"details": e.body})
        except TransportFault as e:
            self._trace_error(e.message, e.details.get("cause"))
        except Exception as e:
            self._trace_error("Unexpected error while sending the log.", repr(e))

    async def _send(self, record: RemoteLogRecord) -> None:
        """POST the record.

        Raises:
            TransportFault: Network-level failure or timeout
            RemoteRejected: Non-2xx response
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint_url,
                    content=record.to_json(),
                    headers=self.headers,
                )
        except httpx.TransportError as e:
            raise TransportFault(details={"cause": repr(e)}) from e

        if response.is_success:
            return

        try:
            body = response.text
        except Exception:
            body = None
        raise RemoteRejected(response.status_code, body)

    def _dispatch(self, record: RemoteLogRecord) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self.deliver(record))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return

        try:
            future = self._get_executor().submit(self._deliver_in_thread, record)
        except RuntimeError as e:
            # Executor already shut down
            self._trace_error("Log dropped, emitter is closed.", repr(e))
            return
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget_future)

    def _deliver_in_thread(self, record: RemoteLogRecord) -> None:
        asyncio.run(self.deliver(record))

    def _forget_future(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._closed:
                raise RuntimeError("emitter is closed")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="log-emitter",
                )
            return self._executor

    def _trace_error(self, message: str, detail: Any = None) -> None:
        try:
            if detail is None:
                self.trace.error(TRACE_PREFIX, message)
            else:
                self.trace.error(TRACE_PREFIX, message, detail)
        except Exception as e:
            logger.error(f"Trace sink failed: {e}")

    async def drain(self) -> None:
        """Wait for background deliveries started from this event loop."""
        while True:
            tasks = [task for task in self._tasks if not task.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait for background deliveries running in worker threads."""
        with self._lock:
            futures = list(self._futures)
        if futures:
            wait(futures, timeout=timeout)

    def close(self) -> None:
        """Wait for worker-thread deliveries and release the thread pool."""
        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
