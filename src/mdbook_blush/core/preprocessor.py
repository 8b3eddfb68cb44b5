"""The blush preprocessor: walks the book and rewrites every chapter."""

import logging

from mdbook_blush.core.markdown import rewrite_markdown
from mdbook_blush.errors import MarkdownRewriteError
from mdbook_blush.models.book import Book, BookItem, Chapter, PartTitle, Separator
from mdbook_blush.models.context import PreprocessorContext

log = logging.getLogger(__name__)


class BlushPreprocessor:
    """Rewrite ``==word==`` into small-caps spans across a whole book."""

    NAME = "mdbook-blush"
    SUPPORTED_RENDERERS = frozenset({"html"})

    @property
    def name(self) -> str:
        return self.NAME

    def supports_renderer(self, renderer: str) -> bool:
        """Check whether the output of ``renderer`` can show the spans."""
        return renderer in self.SUPPORTED_RENDERERS

    def run(self, context: PreprocessorContext, book: Book) -> Book:
        """Rewrite every chapter of ``book`` in place and return it.

        Stops at the first chapter that fails; chapters rewritten before it
        keep their new content.
        """
        log.debug("Preprocessing book for renderer %s", context.renderer)
        for section in book.sections:
            self._preprocess_item(section)
        return book

    def _preprocess_item(self, item: BookItem) -> None:
        if isinstance(item, Chapter):
            self._preprocess_chapter(item)
        elif isinstance(item, (Separator, PartTitle)):
            pass
        else:
            raise TypeError(f"Unknown book item: {type(item).__name__}")

    def _preprocess_chapter(self, chapter: Chapter) -> None:
        log.debug("Rewriting chapter %s", chapter.name)
        try:
            chapter.content = rewrite_markdown(chapter.content)
        except Exception as e:
            raise MarkdownRewriteError(chapter.name, str(e)) from e

        for sub_item in chapter.sub_items:
            self._preprocess_item(sub_item)
