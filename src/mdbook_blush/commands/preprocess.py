"""Preprocess command implementation (the mdBook protocol round trip)."""

import logging
from typing import IO, Any

from mdbook_blush.core.preprocessor import BlushPreprocessor
from mdbook_blush.core.protocol import check_version, parse_input, write_output

log = logging.getLogger(__name__)


def execute_preprocess(reader: IO[Any], writer: IO[str]) -> None:
    """Read ``[context, book]`` from ``reader`` and write the rewritten book.

    Nothing is written to ``writer`` unless every chapter was rewritten.
    """
    preprocessor = BlushPreprocessor()

    context, book = parse_input(reader)
    check_version(preprocessor.name, context)

    book = preprocessor.run(context, book)
    log.debug("Rewrote %d chapter(s)", sum(1 for _ in book.iter_chapters()))
    write_output(book, writer)
