# ABOUTME: Markup-to-text normalization for report content
# ABOUTME: Pure and total; repeated application is a no-op

import re

_SCRIPT_STYLE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_LINE_BREAK = re.compile(r"<br\s*/?>|</p\s*>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")
_INLINE_SPACE = re.compile(r"[^\S\n]+")
_BLANK_LINES = re.compile(r"\s*\n\s*")

ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
}
_ENTITY = re.compile("|".join(re.escape(entity) for entity in ENTITIES), re.IGNORECASE)


def _decode_entities(text: str) -> str:
    return _ENTITY.sub(lambda m: ENTITIES[m.group(0).lower()], text)


def _normalize_once(markup: str) -> str:
    text = _SCRIPT_STYLE.sub("", markup)
    text = _LINE_BREAK.sub("\n", text)
    text = _TAG.sub(" ", text)
    text = _decode_entities(text)
    return collapse_whitespace(text)


def normalize(markup: str) -> str:
    """Convert markup to a single line of plain text.

    Script and style blocks are dropped, break tags become newlines, remaining
    tags are stripped, a fixed set of named entities is decoded and whitespace
    runs collapse to single spaces.

    Decoded entities can form new tags or entities (``&amp;lt;b&amp;gt;``), so
    the pass repeats until the text stops changing. Every change shortens the
    text, which bounds the loop.
    """
    if not markup:
        return ""

    text = markup
    while True:
        cleaned = _normalize_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs (including newlines) to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def tidy_lines(text: str) -> str:
    """Collapse spaces within lines and blank-line runs, keeping single line breaks."""
    text = _INLINE_SPACE.sub(" ", text)
    return _BLANK_LINES.sub("\n", text).strip()
