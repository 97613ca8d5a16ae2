"""
Transfer handles returned by storage clients.

A TransferHandle is the completion signal of one upload plus a side channel
of progress updates. Storage backends drive it with ``report_progress``,
``finish`` and ``fail``; those may be called from worker threads and are
marshalled back onto the event loop that created the handle.

Example:
    >>> handle = client.upload_file(local_file="dist/app.js",
    ...                             remote_params={"Bucket": "b", "Key": "app.js"})
    >>> handle.add_progress_listener(lambda h: print(h.progress_amount))
    >>> await handle  # raises the transfer error on failure
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Generator, List, Optional

from asset_uploader.utils.logging import get_logger

logger = get_logger(__name__)

ProgressListener = Callable[["TransferHandle"], None]


class TransferState(str, Enum):
    """Lifecycle of a transfer."""

    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


class TransferHandle:
    """
    Completion signal and progress side channel for a single upload.

    Attributes:
        local_file: Path of the file being uploaded
        key: Remote object key
        progress_amount: Bytes transferred so far
        progress_total: Total bytes, or None while still unknown
    """

    def __init__(
        self,
        local_file: str,
        key: str,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.local_file = local_file
        self.key = key
        self.progress_amount = 0
        self.progress_total: Optional[int] = None
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        # Sibling transfers may fail after the aggregate already failed;
        # consume their exceptions so the loop does not report them.
        self._future.add_done_callback(_consume_exception)
        self._listeners: List[ProgressListener] = []

    @property
    def state(self) -> TransferState:
        if not self._future.done():
            return TransferState.PENDING
        if self._future.exception() is not None:
            return TransferState.FAILED
        return TransferState.DONE

    def done(self) -> bool:
        return self._future.done()

    def add_progress_listener(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def report_progress(self, amount: int, total: Optional[int]) -> None:
        """Record transferred bytes and notify listeners."""
        self._call_in_loop(self._apply_progress, amount, total)

    def finish(self) -> None:
        """Mark the transfer as completed."""
        self._call_in_loop(self._resolve, None)

    def fail(self, error: BaseException) -> None:
        """Mark the transfer as failed with ``error``."""
        self._call_in_loop(self._resolve, error)

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    async def wait(self) -> str:
        """Wait for the transfer; returns the local file path."""
        await self._future
        return self.local_file

    def __await__(self) -> Generator[Any, None, str]:
        return self.wait().__await__()

    # ------------------------------------------------------------------

    def _call_in_loop(self, callback: Callable[..., None], *args: Any) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            callback(*args)
        else:
            self._loop.call_soon_threadsafe(callback, *args)

    def _apply_progress(self, amount: int, total: Optional[int]) -> None:
        if self._future.done():
            return
        self.progress_amount = amount
        self.progress_total = total
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                # Progress display must never break the transfer itself
                logger.warning(
                    f"Progress listener failed for {self.key}", exc_info=True
                )

    def _resolve(self, error: Optional[BaseException]) -> None:
        if self._future.done():
            return
        if error is None:
            self._future.set_result(None)
        else:
            self._future.set_exception(error)

    def __repr__(self) -> str:
        return (
            f"TransferHandle(key={self.key!r}, state={self.state.value}, "
            f"progress={self.progress_amount}/{self.progress_total})"
        )


def _consume_exception(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()
