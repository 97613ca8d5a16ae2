"""
Storage client capability.

The upload coordinator only needs one operation from object storage: start
uploading a local file under the given parameters and hand back a
TransferHandle. ``ThreadedStorageClient`` implements that for blocking SDKs
by running each transfer in a worker thread, at most ``max_concurrency`` at a
time.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Set

from asset_uploader.storage.transfer import TransferHandle
from asset_uploader.utils.logging import get_logger

logger = get_logger(__name__)

# Parallel transfers per client
DEFAULT_MAX_CONCURRENCY = 50

ProgressCallback = Callable[[int, Optional[int]], None]


class StorageClient(ABC):
    """Abstract object storage client."""

    @abstractmethod
    def upload_file(self, local_file: str, remote_params: Dict[str, Any]) -> TransferHandle:
        """
        Start uploading ``local_file``.

        Args:
            local_file: Path of the file on disk
            remote_params: Upload parameters; always contains ``Bucket`` and ``Key``

        Returns:
            Handle that completes when the upload ends or fails
        """


class ThreadedStorageClient(StorageClient):
    """
    Storage client for blocking SDKs.

    Subclasses implement ``_transfer``; it runs in a worker thread and may
    call ``on_progress(amount, total)`` any number of times.
    """

    def __init__(self, max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.max_concurrency = max_concurrency
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._semaphore_loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: Set[asyncio.Task] = set()

    def upload_file(self, local_file: str, remote_params: Dict[str, Any]) -> TransferHandle:
        handle = TransferHandle(local_file=local_file, key=remote_params.get("Key", ""))
        task = asyncio.get_running_loop().create_task(
            self._run(handle, local_file, dict(remote_params))
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return handle

    async def _run(
        self,
        handle: TransferHandle,
        local_file: str,
        remote_params: Dict[str, Any],
    ) -> None:
        # One semaphore per event loop; each build may run in a fresh loop
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)
            self._semaphore_loop = loop

        async with self._semaphore:
            try:
                await asyncio.to_thread(
                    self._transfer, local_file, remote_params, handle.report_progress
                )
            except Exception as e:
                logger.debug(f"Transfer failed for {handle.key}: {e}")
                handle.fail(e)
            else:
                handle.finish()

    @abstractmethod
    def _transfer(
        self,
        local_file: str,
        remote_params: Dict[str, Any],
        on_progress: ProgressCallback,
    ) -> None:
        """Blocking upload of one file."""
