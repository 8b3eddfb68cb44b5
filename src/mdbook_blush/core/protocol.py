"""Reading and writing the JSON mdBook exchanges with preprocessors."""

import json
import logging
from typing import IO, Any

from pydantic import ValidationError
from semver import Version

from mdbook_blush.errors import ProtocolError
from mdbook_blush.models.book import Book
from mdbook_blush.models.context import PreprocessorContext

log = logging.getLogger(__name__)

# mdBook release the book JSON models follow.
MDBOOK_VERSION = "0.4.40"


def parse_input(reader: IO[Any]) -> tuple[PreprocessorContext, Book]:
    """Decode the ``[context, book]`` pair mdBook writes to stdin."""
    raw = reader.read()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Unable to parse the input: {e}") from e

    if not isinstance(data, list) or len(data) != 2:
        raise ProtocolError("Unable to parse the input: expected [context, book]")

    try:
        context = PreprocessorContext.model_validate(data[0])
        book = Book.model_validate(data[1])
    except ValidationError as e:
        raise ProtocolError(f"Unable to parse the input: {e}") from e

    return context, book


def write_output(book: Book, writer: IO[str]) -> None:
    """Write the processed book back for mdBook to pick up."""
    json.dump(book.to_wire(), writer)
    writer.flush()


def is_compatible(built_version: str, host_version: str) -> bool:
    """Check ``host_version`` against ``^built_version`` (Cargo caret rules).

    Raises:
        ValueError: If either version is not valid semver
    """
    built = Version.parse(built_version)
    host = Version.parse(host_version)

    if host < built or host.major != built.major:
        return False
    if built.major == 0 and host.minor != built.minor:
        return False
    if built.major == 0 and built.minor == 0 and host.patch != built.patch:
        return False
    return True


def check_version(
    plugin_name: str,
    context: PreprocessorContext,
    built_version: str = MDBOOK_VERSION,
) -> bool:
    """Warn when mdBook is newer or older than the version we target.

    A mismatch never stops processing.
    """
    try:
        compatible = is_compatible(built_version, context.mdbook_version)
    except ValueError as e:
        raise ProtocolError(
            f"Invalid mdbook version '{context.mdbook_version}': {e}"
        ) from e

    if not compatible:
        log.warning(
            "The %s plugin was built against version %s of mdbook, "
            "but is being called from version %s",
            plugin_name,
            built_version,
            context.mdbook_version,
        )
    return compatible
