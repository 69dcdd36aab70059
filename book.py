from __future__ import annotations


class Book:
    """Represents a single book item in the library."""

    def __init__(self, id: str, title: str, author: str, publication_year: int, is_available: bool = True) -> None:
        self.id = id.strip()
        self.title = title.strip()
        self.author = author.strip()
        self.publication_year = int(publication_year)
        self.is_available = is_available

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({self.publication_year})"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Book(id={self.id!r}, title={self.title!r}, is_available={self.is_available!r})"

    def details(self) -> str:
        return (
            f"Book [ID: {self.id}, Title: {self.title}, Author: {self.author}, "
            f"Year: {self.publication_year}, Available: {str(self.is_available).lower()}]"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "publication_year": self.publication_year,
            "is_available": self.is_available,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # CSV imports use "year"; to_dict() uses "publication_year"
        year = data.get("publication_year", data.get("year"))
        if year is None or str(year).strip() == "":
            raise ValueError("Publication year is required.")
        available = data.get("is_available", True)
        if isinstance(available, str):
            available = available.strip().lower() not in ("false", "0", "no")
        return Book(
            id=str(data["id"]),
            title=data["title"],
            author=data["author"],
            publication_year=int(year),
            is_available=bool(available),
        )
