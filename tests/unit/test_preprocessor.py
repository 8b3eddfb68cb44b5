"""Unit tests for the BlushPreprocessor tree walk."""

import pytest

from mdbook_blush.core import preprocessor as preprocessor_module
from mdbook_blush.core.preprocessor import BlushPreprocessor
from mdbook_blush.core.scanner import SPAN_CLOSE, SPAN_OPEN
from mdbook_blush.errors import MarkdownRewriteError
from mdbook_blush.models import Book, Chapter, PartTitle, PreprocessorContext, Separator


@pytest.fixture
def context():
    return PreprocessorContext(root=".", renderer="html", mdbook_version="0.4.40")


@pytest.fixture
def nested_book():
    """A book three chapters deep with a separator and a part title."""
    return Book(
        sections=[
            PartTitle(title="Part ==One=="),
            Chapter(
                name="Top",
                content="==top==\n",
                sub_items=[
                    Chapter(
                        name="Middle",
                        content="==middle==\n",
                        sub_items=[Chapter(name="Bottom", content="==bottom==\n")],
                    ),
                    Separator(),
                ],
            ),
            Separator(),
            Chapter(name="Last", content="==last==\n"),
        ]
    )


class TestBlushPreprocessor:
    """Tests for the preprocessor's capabilities."""

    def test_name(self):
        """Test the name mdBook reports for the plugin."""
        assert BlushPreprocessor().name == "mdbook-blush"

    def test_supports_html(self):
        """Test the html renderer is supported."""
        assert BlushPreprocessor().supports_renderer("html") is True

    @pytest.mark.parametrize("renderer", ["pdf", "epub", "", "HTML", "html5", "markdown"])
    def test_rejects_other_renderers(self, renderer):
        """Test every other renderer is unsupported."""
        assert BlushPreprocessor().supports_renderer(renderer) is False


class TestTreeWalk:
    """Tests for rewriting every chapter of a book."""

    def test_every_depth_rewritten(self, context, nested_book):
        """Test chapters at every depth get their spans."""
        book = BlushPreprocessor().run(context, nested_book)

        for chapter in book.iter_chapters():
            body = chapter.name.lower()
            assert chapter.content.strip() == f"{SPAN_OPEN}{body}{SPAN_CLOSE}"

    def test_non_chapters_untouched(self, context, nested_book):
        """Test separators and part titles pass through unchanged."""
        book = BlushPreprocessor().run(context, nested_book)

        assert book.sections[0] == PartTitle(title="Part ==One==")
        assert isinstance(book.sections[2], Separator)
        assert isinstance(book.sections[1].sub_items[1], Separator)

    def test_mutates_in_place(self, context, nested_book):
        """Test the same book object is returned."""
        assert BlushPreprocessor().run(context, nested_book) is nested_book

    def test_visits_depth_first(self, context, nested_book, monkeypatch):
        """Test chapters are rewritten in document order, parents first."""
        seen = []

        def fake_rewrite(content):
            seen.append(content.strip())
            return content

        monkeypatch.setattr(preprocessor_module, "rewrite_markdown", fake_rewrite)
        BlushPreprocessor().run(context, nested_book)

        assert seen == ["==top==", "==middle==", "==bottom==", "==last=="]

    def test_empty_book(self, context):
        """Test a book without sections is returned as is."""
        assert BlushPreprocessor().run(context, Book()).sections == []


class TestFailurePropagation:
    """Tests for aborting on the first broken chapter."""

    def test_stops_at_failing_chapter(self, context, nested_book, monkeypatch):
        """Test no chapter after the failing one is processed."""
        seen = []

        def fake_rewrite(content):
            if "middle" in content:
                raise ValueError("unbalanced event stream")
            seen.append(content.strip())
            return "rewritten\n"

        monkeypatch.setattr(preprocessor_module, "rewrite_markdown", fake_rewrite)

        with pytest.raises(MarkdownRewriteError) as exc_info:
            BlushPreprocessor().run(context, nested_book)

        assert exc_info.value.chapter_name == "Middle"
        assert "unbalanced event stream" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert seen == ["==top=="]

    def test_earlier_chapters_not_rolled_back(self, context, nested_book, monkeypatch):
        """Test chapters rewritten before the failure keep their content."""

        def fake_rewrite(content):
            if "last" in content:
                raise ValueError("boom")
            return "rewritten\n"

        monkeypatch.setattr(preprocessor_module, "rewrite_markdown", fake_rewrite)

        with pytest.raises(MarkdownRewriteError):
            BlushPreprocessor().run(context, nested_book)

        top = nested_book.sections[1]
        assert top.content == "rewritten\n"
        assert nested_book.sections[3].content == "==last==\n"

    def test_unknown_item_type(self, context):
        """Test an item outside the closed set is an error."""
        book = Book()
        book.sections.append("Separator")

        with pytest.raises(TypeError):
            BlushPreprocessor().run(context, book)
