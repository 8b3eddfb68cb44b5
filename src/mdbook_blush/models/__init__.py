"""Data models."""

from mdbook_blush.models.book import (
    Book,
    BookItem,
    Chapter,
    PartTitle,
    Separator,
    item_to_wire,
)
from mdbook_blush.models.context import PreprocessorContext

__all__ = [
    # Book models
    "Book",
    "BookItem",
    "Chapter",
    "PartTitle",
    "Separator",
    "item_to_wire",
    # Context models
    "PreprocessorContext",
]
