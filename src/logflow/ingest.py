"""Line ingestion: the shared queue and the producers that fill it."""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import TYPE_CHECKING

import aiofiles

from logflow.errors import IngestQueuePoisoned

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable
    from pathlib import Path

    from logflow.events import CancellationToken

logger = logging.getLogger(__name__)

_BATCH_SIZE = 500
_TAIL_INTERVAL = 0.1
_MISSING_FILE_INTERVAL = 0.2


class IngestQueue:
    """Lock-guarded hand-off between line producers and the dispatcher.

    The lock is held only for the append or the swap in ``drain``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: list[str] = []
        self._error: BaseException | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def push(self, lines: Iterable[str]) -> None:
        batch = list(lines)
        if not batch:
            return
        with self._lock:
            self._pending.extend(batch)

    def drain(self) -> list[str]:
        """Take everything currently queued without waiting.

        Raises IngestQueuePoisoned once a producer has failed.
        """
        with self._lock:
            if self._error is not None:
                msg = f"line producer failed: {self._error}"
                raise IngestQueuePoisoned(msg) from self._error
            pending, self._pending = self._pending, []
        return pending

    def poison(self, error: BaseException) -> None:
        with self._lock:
            self._error = error

    @property
    def is_poisoned(self) -> bool:
        return self._error is not None


def is_pipe() -> bool:
    """Check if stdin is a pipe (not a terminal)."""
    return not sys.stdin.isatty()


async def read_file_async(path: Path, *, tail: bool = False) -> AsyncIterator[list[str]]:
    """Read batches of lines from a file asynchronously, optionally tailing.

    Text after the last newline is held back while tailing until the writer
    finishes the line. Without tailing it is yielded as the final line.
    """
    async with aiofiles.open(path, errors="replace") as f:
        batch: list[str] = []
        partial = ""
        async for raw_line in f:
            if not raw_line.endswith("\n"):
                partial = raw_line
                break
            batch.append(raw_line.rstrip("\n"))
            if len(batch) >= _BATCH_SIZE:
                yield batch
                batch = []
        if partial and not tail:
            batch.append(partial)
        if batch:
            yield batch

        if not tail:
            return

        # Tail mode: poll for new content
        last_size = path.stat().st_size
        while True:
            line = await f.readline()
            if line:
                partial += line
                if partial.endswith("\n"):
                    yield [partial.rstrip("\n")]
                    partial = ""
                continue
            # Check for file truncation (log rotation)
            try:
                current_size = path.stat().st_size
            except OSError:
                await asyncio.sleep(_MISSING_FILE_INTERVAL)
                continue
            if current_size < last_size:
                logger.info("%s truncated, reading from start", path)
                await f.seek(0)
                partial = ""
            last_size = current_size
            await asyncio.sleep(_TAIL_INTERVAL)


async def read_pipe_async(pipe_fd: int) -> AsyncIterator[list[str]]:
    """Read batches of lines from a pipe file descriptor asynchronously."""
    async with aiofiles.open(pipe_fd, closefd=True, errors="replace") as f:
        async for raw_line in f:
            yield [raw_line.rstrip("\n")]


async def produce(source: AsyncIterator[list[str]], ingest: IngestQueue, token: CancellationToken) -> None:
    """Push every batch from ``source`` into the queue until cancelled.

    An unexpected failure poisons the queue so the dispatcher stops instead
    of showing a log with a silent gap.
    """
    try:
        async for batch in source:
            if token.is_cancelled:
                break
            ingest.push(batch)
    except Exception as e:  # noqa: BLE001
        logger.exception("line producer failed")
        ingest.poison(e)


async def tail_file(path: Path, ingest: IngestQueue, token: CancellationToken, *, follow: bool = True) -> None:
    """Feed ``path`` into the queue, following appends and truncation when ``follow`` is set."""
    await produce(read_file_async(path, tail=follow), ingest, token)


async def read_pipe(pipe_fd: int, ingest: IngestQueue, token: CancellationToken) -> None:
    """Feed a pipe into the queue until it closes."""
    await produce(read_pipe_async(pipe_fd), ingest, token)
