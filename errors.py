class LibraryError(Exception):
    """Base class for recoverable catalogue errors reported back to the shell."""


class BookNotFoundError(LibraryError, LookupError):
    """No book with the given identifier is in the catalogue."""

    def __init__(self, book_id: str) -> None:
        self.book_id = book_id
        super().__init__(f"No book found with ID: {book_id}")


class BookUnavailableError(LibraryError):
    """The book exists but is currently borrowed."""

    def __init__(self, book_id: str) -> None:
        self.book_id = book_id
        super().__init__("This book is currently unavailable.")


class TransactionLogFullError(Exception):
    """A timed publish could not find room in the transaction log."""


class LibraryClosedError(LibraryError):
    """The library has been closed and accepts no further changes."""

    def __init__(self) -> None:
        super().__init__("The library is closed.")
