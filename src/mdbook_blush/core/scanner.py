"""Rewrite ==word== delimiter pairs into small-caps spans."""

import re
from enum import Enum

SPAN_OPEN = '<span class="small-caps">'
SPAN_CLOSE = "</span>"

# Runs of "=" are the only points of interest; everything else is copied.
_EQUALS_RUN = re.compile(r"=+")
_DELIMITER_LENGTH = 2


class _State(str, Enum):
    """Scanner state between two runs of equals signs."""

    LITERAL = "literal"
    OPEN = "open"


def blush(text: str) -> str:
    """Replace every well-formed ``==X==`` in a text run with a span.

    A run of exactly two ``=`` is a delimiter. Single ``=`` and runs of
    three or more are literal and neither open nor close a span. When an
    opener is followed by a literal run instead of a closer, both stay as
    they are and scanning carries on after that run. A span body is never
    rescanned.
    """
    fragments: list[str] = []
    cursor = 0
    state = _State.LITERAL
    opener: re.Match[str] | None = None

    for run in _EQUALS_RUN.finditer(text):
        is_delimiter = len(run.group()) == _DELIMITER_LENGTH

        if state is _State.LITERAL:
            if is_delimiter:
                opener = run
                state = _State.OPEN
            continue

        if is_delimiter and opener is not None:
            fragments.append(text[cursor : opener.start()])
            fragments.append(SPAN_OPEN)
            fragments.append(text[opener.end() : run.start()])
            fragments.append(SPAN_CLOSE)
            cursor = run.end()
        opener = None
        state = _State.LITERAL

    fragments.append(text[cursor:])
    return "".join(fragments)
