"""One-shot completion handles carried by outbound surface events.

A :class:`Continuation` is both the callback the host invokes with
``(result, error)`` and the handle the submitting surface returns to its
caller. It may be invoked exactly once. Invocation resolves an underlying
:class:`concurrent.futures.Future`, so callers can poll it or ``await`` it.

Example:
    ```python
    continuation = surface.submit()

    # host side, some time later
    continuation(result, None)

    # caller side
    result = await continuation
    ```
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
import uuid
from typing import Any, Callable, Generator

from dataknobs_activity.exceptions import ContinuationError, OperationError

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Any, Any], None]


class Continuation:
    """Exactly-once completion of a host request.

    Args:
        callback: Called with ``(result, error)`` when the host completes the
            request
        correlation_id: Identifier tying the continuation to its event
        name: Name of the event this continuation answers, for logging
    """

    def __init__(
        self,
        callback: CompletionCallback | None = None,
        correlation_id: str | None = None,
        name: str = "",
    ) -> None:
        self._callback = callback
        self._future: concurrent.futures.Future[Any] = concurrent.futures.Future()
        self._lock = threading.Lock()
        self._invoked = False
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.name = name

    def __call__(self, result: Any = None, error: Any = None) -> None:
        """Complete the request with a result or an error.

        Args:
            result: Successful outcome; ignored when ``error`` is given
            error: Failure reported by the host. Only a truthy value counts
                as a failure, so ``None`` or ``""`` completes successfully.

        Raises:
            ContinuationError: If the continuation was already invoked
        """
        with self._lock:
            if self._invoked:
                raise ContinuationError(
                    f"Continuation for '{self.name}' already invoked",
                    context={"correlation_id": self.correlation_id, "event": self.name},
                )
            self._invoked = True

        failed = bool(error)
        if failed:
            exc = error if isinstance(error, BaseException) else OperationError(
                str(error), context={"error": error}
            )
            self._future.set_exception(exc)
        else:
            self._future.set_result(result)

        logger.debug(
            "Continuation %s for %s completed (%s)",
            self.correlation_id[:8],
            self.name,
            "error" if failed else "success",
        )

        if self._callback is not None:
            try:
                self._callback(None if failed else result, error if failed else None)
            except Exception:
                logger.exception(
                    "Error in completion callback for %s (%s)",
                    self.name,
                    self.correlation_id[:8],
                )

    @property
    def invoked(self) -> bool:
        """Whether the host has completed this continuation."""
        return self._invoked

    def done(self) -> bool:
        """Whether a result or error is available."""
        return self._future.done()

    def result(self, timeout: float | None = None) -> Any:
        """Return the result, raising the host's error if it failed.

        Raises:
            concurrent.futures.TimeoutError: If not completed within ``timeout``
        """
        return self._future.result(timeout=timeout)

    def exception(self, timeout: float | None = None) -> BaseException | None:
        """Return the host's error, or None on success."""
        return self._future.exception(timeout=timeout)

    def add_done_callback(self, fn: Callable[[Continuation], Any]) -> None:
        """Call ``fn`` with this continuation once it completes."""
        self._future.add_done_callback(lambda _: fn(self))

    def __await__(self) -> Generator[Any, None, Any]:
        return asyncio.wrap_future(self._future).__await__()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"Continuation(name={self.name!r}, id={self.correlation_id[:8]!r}, {state})"


__all__ = ["Continuation", "CompletionCallback"]
