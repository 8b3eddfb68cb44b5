"""Install command implementation: wire blush into an mdBook project."""

import logging
from dataclasses import dataclass
from pathlib import Path

import tomlkit
from tomlkit.container import OutOfOrderTableProxy
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import Array, Table
from tomlkit.toml_document import TOMLDocument

from mdbook_blush.errors import InstallError

log = logging.getLogger(__name__)

BOOK_TOML = "book.toml"
CSS_FILE_NAME = "blush.css"
DEFAULT_CSS_DIR = Path("theme/css")

BLUSH_CSS = """\
.small-caps {
    font-variant: small-caps;
}
"""

_TableLike = (Table, OutOfOrderTableProxy, TOMLDocument)


@dataclass
class InstallConfig:
    """Where to find book.toml and where to put the stylesheet."""

    book_root_dir: Path
    css_path: Path  # Relative to book_root_dir

    @classmethod
    def from_options(
        cls, book_root_dir: Path, css_dir: Path = DEFAULT_CSS_DIR
    ) -> "InstallConfig":
        return cls(book_root_dir=book_root_dir, css_path=css_dir / CSS_FILE_NAME)

    @property
    def book_toml_path(self) -> Path:
        return self.book_root_dir / BOOK_TOML


class _BookTomlEditor:
    """Adds missing entries to a parsed book.toml and records changes."""

    def __init__(self, document: TOMLDocument):
        self.document = document
        self.changed = False

    def table(self, parent, key: str, dotted: str, implicit: bool = True):
        """Return ``parent[key]``, creating a table when it is missing."""
        if key not in parent:
            parent[key] = tomlkit.table(is_super_table=True if implicit else None)
            self.changed = True
        item = parent[key]
        if not isinstance(item, _TableLike):
            raise InstallError(f"`{dotted}` entry must be a table")
        return item

    def array(self, parent, key: str, dotted: str) -> Array:
        """Return ``parent[key]``, creating an empty array when it is missing."""
        if key not in parent:
            parent[key] = tomlkit.array()
            self.changed = True
        item = parent[key]
        if not isinstance(item, Array):
            raise InstallError(f"`{dotted}` must be an array")
        return item


def edit_book_toml(config: InstallConfig) -> bool:
    """Register the stylesheet and the preprocessor in book.toml.

    Formatting and comments are preserved. The file is only rewritten when an
    entry was added.

    Returns:
        True if book.toml was modified
    """
    book_path = config.book_toml_path
    try:
        document = tomlkit.parse(book_path.read_text())
    except OSError as e:
        raise InstallError(f"Cannot read {book_path}: {e}") from e
    except TOMLKitError as e:
        raise InstallError(f"Cannot parse {book_path}: {e}") from e

    editor = _BookTomlEditor(document)
    css_entry = config.css_path.as_posix()

    output_table = editor.table(document, "output", "output")
    html_table = editor.table(output_table, "html", "output.html", implicit=False)
    additional_css = editor.array(
        html_table, "additional-css", "output.html.additional-css"
    )
    if not any(entry == css_entry for entry in additional_css):
        additional_css.append(css_entry)
        editor.changed = True

    preprocessor_table = editor.table(document, "preprocessor", "preprocessor")
    if "blush" not in preprocessor_table:
        preprocessor_table["blush"] = tomlkit.table()
        editor.changed = True
    elif not isinstance(preprocessor_table["blush"], _TableLike):
        log.warning("preprocessor.blush is not a table")

    if editor.changed:
        try:
            book_path.write_text(tomlkit.dumps(document))
        except OSError as e:
            raise InstallError(f"Cannot write {book_path}: {e}") from e

    return editor.changed


def write_file(path: Path, content: str) -> None:
    """Write ``content`` to ``path``, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallError(f"cannot create parent directory of {path}: {e}") from e
    try:
        path.write_text(content)
    except OSError as e:
        raise InstallError(f"cannot write to {path}: {e}") from e


def write_css(config: InstallConfig) -> Path:
    """Write the small-caps stylesheet and return its path."""
    css_file = config.book_root_dir / config.css_path
    write_file(css_file, BLUSH_CSS)
    return css_file


def execute_install(book_root_dir: Path, css_dir: Path = DEFAULT_CSS_DIR) -> None:
    """Register blush in ``book_root_dir/book.toml`` and install its CSS."""
    config = InstallConfig.from_options(book_root_dir, css_dir)

    try:
        if edit_book_toml(config):
            log.info("Updated %s", config.book_toml_path)
    except InstallError as e:
        raise InstallError(f"cannot edit book.toml: {e}") from e

    try:
        css_file = write_css(config)
    except InstallError as e:
        raise InstallError(f"cannot install css: {e}") from e
    log.info("Wrote %s", css_file)
