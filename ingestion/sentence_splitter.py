"""
Sentence Splitter for oversized text

Regex-based sentence boundary detection used as the second fallback when a
single line of a paragraph does not fit the token budget. It is a heuristic,
not an NLP sentence segmenter.

Design:
- Split after sentence-ending punctuation (.!?) followed by whitespace
- Protect common abbreviations (e.g., Dr., etc.) and list ordinals (1.)
  from triggering false splits
- Lossless mode keeps the trailing whitespace on each piece, so joining the
  pieces gives back the input exactly
- No external dependencies (no spaCy, no NLTK)

Usage:
    from ingestion.sentence_splitter import split_sentences

    sentences = split_sentences("This is one. This is two.")
    # ["This is one.", "This is two."]
"""

import re

# Same-length placeholder, so offsets in the protected text match the input.
_DOT_PLACEHOLDER = "\x00"

_ABBREVIATIONS = {
    # Titles
    "mr", "mrs", "ms", "dr", "prof", "sr", "jr", "st",
    # Latin and common
    "etc", "vs", "cf", "approx", "incl", "misc", "al",
    # References
    "nr", "fig", "figs", "sec", "ch", "vol", "pp", "eq", "ref",
    # Months (abbreviated)
    "jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep",
    "sept", "oct", "nov", "dec",
}

_ABBREV_PATTERN = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(a) for a in sorted(_ABBREVIATIONS)) + r")\.(?=\s)",
    re.IGNORECASE,
)

# Multi-part abbreviations: e.g., i.e., U.S., a.m.
_MULTI_ABBREV_PATTERN = re.compile(r"\b[a-zA-Z]\.(?:[a-zA-Z]\.)+")

# List ordinals at the start of a line or after whitespace: "1. ", "23. "
_ORDINAL_PATTERN = re.compile(r"(?:(?<=\s)|^)\d{1,3}\.(?=\s)", re.MULTILINE)

_BOUNDARY_PATTERN = re.compile(r"(?<=[.!?])\s+")


def _protect_dots(text: str) -> str:
    """Replace dots in abbreviations and ordinals with placeholders."""
    # Multi-part first: "e.g." must not be seen as "g."
    text = _MULTI_ABBREV_PATTERN.sub(
        lambda m: m.group().replace(".", _DOT_PLACEHOLDER), text
    )
    text = _ABBREV_PATTERN.sub(
        lambda m: m.group().replace(".", _DOT_PLACEHOLDER), text
    )
    text = _ORDINAL_PATTERN.sub(
        lambda m: m.group().replace(".", _DOT_PLACEHOLDER), text
    )
    return text


def sentence_spans(text: str) -> list[tuple[int, int]]:
    """
    Return (start, end) offsets of each sentence, trailing whitespace included.

    The spans are contiguous and cover the whole input.
    """
    if not text:
        return []

    protected = _protect_dots(text)
    spans: list[tuple[int, int]] = []
    start = 0
    for match in _BOUNDARY_PATTERN.finditer(protected):
        end = match.end()
        if end >= len(text):
            break
        spans.append((start, end))
        start = end
    spans.append((start, len(text)))
    return spans


def split_sentences(text: str, keep_whitespace: bool = False) -> list[str]:
    """
    Split text into sentences.

    Args:
        text: Input text to split into sentences.
        keep_whitespace: Keep each sentence's trailing whitespace so that
            "".join(result) == text.

    Returns:
        List of sentence strings. Empty/whitespace input returns an empty
        list. Without keep_whitespace each sentence is stripped and empty
        pieces are dropped.
    """
    if not text or not text.strip():
        return []

    pieces = [text[start:end] for start, end in sentence_spans(text)]
    if keep_whitespace:
        return pieces

    return [piece.strip() for piece in pieces if piece.strip()]
