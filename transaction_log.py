"""
Bounded transaction log channel and the background worker that drains it.

Producers publish LogEntry objects onto a TransactionLog; a single LogConsumer
thread takes them off in FIFO order, commits each one to a sink and then waits
a fixed delay. Because the consumer is throttled, a fast producer eventually
fills the channel and blocks in publish() until the consumer catches up.
"""

import logging
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Union

from errors import TransactionLogFullError

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
DEFAULT_TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Y"


@dataclass(frozen=True)
class LogEntry:
    message: str
    created_at: datetime = field(default_factory=datetime.now)


class TransactionLog:
    """Thread-safe bounded FIFO of log entries."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"Transaction log capacity must be a positive integer, got {capacity!r}.")
        self.capacity = capacity
        self._queue: "queue.Queue[LogEntry]" = queue.Queue(maxsize=capacity)
        self._counter_lock = threading.Lock()
        self.published_count = 0
        self.consumed_count = 0

    def publish(self, entry: Union[LogEntry, str], timeout: Optional[float] = None) -> LogEntry:
        """Enqueue an entry, blocking while the channel is full.

        With timeout=None this waits as long as it takes and never drops the entry.
        With a timeout, TransactionLogFullError is raised once it expires.
        """
        if isinstance(entry, str):
            entry = LogEntry(entry)
        try:
            self._queue.put(entry, block=True, timeout=timeout)
        except queue.Full as exc:
            raise TransactionLogFullError(
                f"Transaction log is full ({self.capacity} entries), could not publish: {entry.message}"
            ) from exc
        with self._counter_lock:
            self.published_count += 1
        return entry

    def consume(self, timeout: Optional[float] = None) -> LogEntry:
        """Remove and return the oldest entry, blocking until one is available.

        Raises queue.Empty if a timeout is given and nothing arrives in time.
        """
        entry = self._queue.get(block=True, timeout=timeout)
        with self._counter_lock:
            self.consumed_count += 1
        return entry

    def drain(self) -> List[LogEntry]:
        """Remove everything currently queued without blocking, oldest first."""
        entries: List[LogEntry] = []
        while True:
            try:
                entry = self._queue.get_nowait()
            except queue.Empty:
                break
            with self._counter_lock:
                self.consumed_count += 1
            entries.append(entry)
        return entries

    def pending(self) -> int:
        """Approximate number of queued entries."""
        return self._queue.qsize()

    def __len__(self) -> int:
        return self.pending()


class LogConsumer(threading.Thread):
    """Background worker that commits transaction log entries one at a time.

    `wait` is called with `delay` after every commit and defaults to the
    cancellation event's wait(), so stop() cuts the throttle short. Tests inject
    `wait`, `clock` and `sink` to avoid real sleeps and stdout.
    """

    def __init__(
        self,
        channel: TransactionLog,
        delay: float = 1.0,
        sink: Callable[[str], None] = print,
        clock: Callable[[], datetime] = datetime.now,
        wait: Optional[Callable[[float], object]] = None,
        poll_interval: float = 0.1,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    ) -> None:
        super().__init__(name="transaction-log-consumer")
        if delay < 0:
            raise ValueError("Consumer delay cannot be negative.")
        self.channel = channel
        self.delay = delay
        self.sink = sink
        self.clock = clock
        self.poll_interval = poll_interval
        self.timestamp_format = timestamp_format
        self._cancelled = threading.Event()
        self._wait = wait if wait is not None else self._cancelled.wait
        self.committed = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self) -> None:
        logger.debug("Transaction log consumer started (delay=%ss)", self.delay)
        while not self._cancelled.is_set():
            try:
                entry = self.channel.consume(timeout=self.poll_interval)
            except queue.Empty:
                continue
            # An entry taken off the channel is always committed, even if stop() raced us.
            self.commit(entry)
            if self.delay:
                self._wait(self.delay)
        logger.debug("Transaction log consumer stopped after %d commits", self.committed)

    def format_entry(self, entry: LogEntry) -> str:
        timestamp = self.clock().strftime(self.timestamp_format)
        return f"Transaction Log: {entry.message} - {timestamp}"

    def commit(self, entry: LogEntry) -> str:
        line = self.format_entry(entry)
        try:
            self.sink(line)
        except Exception:
            logger.exception("Transaction log sink failed for entry: %s", entry.message)
            return line
        self.committed += 1
        logger.debug("Committed: %s", entry.message)
        return line

    def flush(self) -> int:
        """Commit everything still queued, without throttling. Call only once the thread has stopped."""
        entries = self.channel.drain()
        for entry in entries:
            self.commit(entry)
        return len(entries)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._cancelled.set()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout)
            if self.is_alive():
                logger.warning("Transaction log consumer did not stop within %ss", timeout)
