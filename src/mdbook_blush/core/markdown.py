"""Round-trip chapter markdown through mistletoe, blushing the text."""

import re

from mistletoe import Document, block_token, span_token
from mistletoe.markdown_renderer import MarkdownRenderer
from mistletoe.token import Token

from mdbook_blush.core.scanner import blush

# Tokens whose raw text is code, HTML or an escaped character, not prose.
_NON_TEXT_TOKENS = (
    span_token.InlineCode,
    span_token.EscapeSequence,
    block_token.CodeFence,
    block_token.BlockCode,
    block_token.HtmlBlock,
)

# Reference links whose text doubles as the label of their definition.
_LABEL_AS_TEXT = ("shortcut", "collapsed")

# mistletoe decodes entities in text runs and the markdown renderer writes the
# decoded characters back, so an "&" that could start a reference is hidden
# from the parser.
_REFERENCE_START = re.compile(r"&(?=[#A-Za-z])")
_PLACEHOLDER_RANGE = range(0xE000, 0xF900)


def _pick_placeholder(content: str) -> str:
    """Return a private-use character that does not occur in ``content``."""
    for codepoint in _PLACEHOLDER_RANGE:
        candidate = chr(codepoint)
        if candidate not in content:
            return candidate
    raise ValueError("no free placeholder character for '&'")


def _blush_tokens(token: Token) -> None:
    """Apply the scanner to every plain-text token below ``token``."""
    if isinstance(token, _NON_TEXT_TOKENS):
        return
    if isinstance(token, (span_token.Link, span_token.Image)):
        if getattr(token, "dest_type", None) in _LABEL_AS_TEXT:
            return
    if isinstance(token, span_token.RawText):
        token.content = blush(token.content)
        return

    # Table headers are kept outside the children list.
    header = getattr(token, "header", None)
    if header is not None:
        _blush_tokens(header)
    for child in token.children or ():
        _blush_tokens(child)


def rewrite_markdown(content: str) -> str:
    """Parse markdown, rewrite its text runs and render it back to markdown.

    Tables, strikethrough and reference definitions are always recognised so
    their text is not mistaken for paragraph prose. Everything that is not a
    text run, including entity and character references, is reproduced by
    the markdown renderer unchanged.
    """
    placeholder = _pick_placeholder(content)
    with MarkdownRenderer() as renderer:
        document = Document(_REFERENCE_START.sub(placeholder, content))
        _blush_tokens(document)
        rendered = renderer.render(document)
    return rendered.replace(placeholder, "&")
