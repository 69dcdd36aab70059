import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional

from book import Book
from catalogue import Catalogue
from config import settings
from errors import BookNotFoundError, BookUnavailableError, LibraryClosedError
from transaction_log import LogConsumer, LogEntry, TransactionLog

logger = logging.getLogger(__name__)


class Library:
    """Manages the book catalogue and feeds every mutation to the transaction log."""

    def __init__(
        self,
        capacity: Optional[int] = None,
        delay: Optional[float] = None,
        sink: Callable[[str], None] = print,
        clock: Callable[[], datetime] = datetime.now,
        wait: Optional[Callable[[float], object]] = None,
        poll_interval: Optional[float] = None,
    ) -> None:
        # Anything not passed explicitly comes from config.settings (env / .env)
        self._catalogue = Catalogue()
        self._lock = threading.RLock()
        # Guards _closed and _in_flight; close() waits on it for running mutations
        self._state = threading.Condition()
        self._closed = False
        self._in_flight = 0
        self.transaction_log = TransactionLog(capacity if capacity is not None else settings.log_capacity)
        self.consumer = LogConsumer(
            self.transaction_log,
            delay=delay if delay is not None else settings.log_delay,
            sink=sink,
            clock=clock,
            wait=wait,
            poll_interval=poll_interval if poll_interval is not None else settings.log_poll_interval,
            timestamp_format=settings.log_timestamp_format,
        )
        self.consumer.start()

    # ------------------------- Core operations ------------------------- #
    def add_item(self, book: Book) -> None:
        with self._mutation():
            with self._lock:
                self._catalogue.add(book)
            logger.debug("Added %s (id=%s)", book.title, book.id)
            self._publish(f"Book added: {book.title}")

    def remove_item(self, book: Book) -> bool:
        """Remove a book. Missing books are ignored but the removal is still logged."""
        with self._mutation():
            with self._lock:
                removed = self._catalogue.remove(book)
            logger.debug("Remove %s (id=%s): %s", book.title, book.id, "removed" if removed else "not present")
            self._publish(f"Book removed: {book.title}")
        return removed

    def remove_by_id(self, book_id: str) -> Book:
        with self._mutation():
            with self._lock:
                book = self._catalogue.find(book_id)
                self._catalogue.remove(book)
            self._publish(f"Book removed: {book.title}")
        return book

    def list_all(self) -> List[Book]:
        with self._lock:
            return self._catalogue.list_all()

    def display_all(self, out: Callable[[str], None] = print) -> None:
        for book in self.list_all():
            out(book.details())

    def find(self, book_id: str) -> Book:
        with self._lock:
            return self._catalogue.find(book_id)

    def borrow(self, book_id: str) -> Book:
        with self._mutation():
            with self._lock:
                book = self._catalogue.find(book_id)
                if not book.is_available:
                    raise BookUnavailableError(book_id)
                book.is_available = False
            self._publish(f"Book borrowed: {book.title}")
        return book

    def return_item(self, book_id: str) -> Book:
        """Mark a book available again. Returning a book that was never borrowed still succeeds."""
        with self._mutation():
            with self._lock:
                book = self._catalogue.find(book_id)
                book.is_available = True
            self._publish(f"Book returned: {book.title}")
        return book

    def get_statistics(self) -> Dict[str, Any]:
        with self._lock:
            books = self._catalogue.list_all()
        available = sum(1 for b in books if b.is_available)
        return {
            "total_books": len(books),
            "available_books": available,
            "borrowed_books": len(books) - available,
            "unique_authors": len({b.author for b in books}),
            "pending_log_entries": self.transaction_log.pending(),
        }

    # ------------------------- Transaction log ------------------------- #
    @contextmanager
    def _mutation(self) -> Iterator[None]:
        """Register a catalogue mutation so close() waits for its log entry to land."""
        with self._state:
            if self._closed:
                raise LibraryClosedError()
            self._in_flight += 1
        try:
            yield
        finally:
            with self._state:
                self._in_flight -= 1
                if self._in_flight == 0:
                    self._state.notify_all()

    def _publish(self, message: str) -> LogEntry:
        # Outside the catalogue lock: a full channel blocks only this caller.
        return self.transaction_log.publish(LogEntry(message))

    # ------------------------- Lifecycle ------------------------- #
    @property
    def closed(self) -> bool:
        return self._closed

    def close(self, drain: Optional[bool] = None, timeout: Optional[float] = None) -> int:
        """Stop the log consumer and wait for it.

        New mutations are refused from here on. Mutations already running are
        allowed to publish first, while the consumer still makes room for them.
        With drain (default: settings.drain_on_exit) any entries still queued are
        then committed before returning. Returns how many were flushed that way.
        """
        with self._state:
            if self._closed:
                return 0
            self._closed = True
            if not self._state.wait_for(lambda: self._in_flight == 0, timeout):
                logger.warning("%d library operations still publishing after %ss", self._in_flight, timeout)
        self.consumer.stop(timeout)
        if drain is None:
            drain = settings.drain_on_exit
        flushed = self.consumer.flush() if drain and not self.consumer.is_alive() else 0
        logger.debug("Library closed; %d pending log entries flushed", flushed)
        return flushed

    def __enter__(self) -> "Library":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["Library", "BookNotFoundError", "BookUnavailableError", "LibraryClosedError"]
