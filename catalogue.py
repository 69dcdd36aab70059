from typing import Iterator, List

from book import Book
from errors import BookNotFoundError


class Catalogue:
    """Ordered in-memory collection of books.

    Not synchronized on its own; Library serializes every access with its lock.
    Duplicate ids are accepted and find() returns the first match.
    """

    def __init__(self) -> None:
        self._books: List[Book] = []

    def add(self, book: Book) -> None:
        self._books.append(book)

    def remove(self, book: Book) -> bool:
        """Remove the first occurrence of book. Returns False if it was not present."""
        try:
            self._books.remove(book)
        except ValueError:
            return False
        return True

    def find(self, book_id: str) -> Book:
        for book in self._books:
            if book.id == book_id:
                return book
        raise BookNotFoundError(book_id)

    def list_all(self) -> List[Book]:
        return list(self._books)

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self.list_all())
