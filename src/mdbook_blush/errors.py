"""Exception types raised by the preprocessor."""


class BlushError(Exception):
    """Base class for all mdbook-blush errors."""


class ProtocolError(BlushError):
    """Input from mdBook could not be decoded."""


class MarkdownRewriteError(BlushError):
    """A chapter's markdown could not be parsed or rendered back."""

    def __init__(self, chapter_name: str, reason: str):
        self.chapter_name = chapter_name
        self.reason = reason
        super().__init__(f"cannot rewrite chapter '{chapter_name}': {reason}")


class InstallError(BlushError):
    """book.toml or the stylesheet could not be updated."""
