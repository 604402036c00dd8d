"""
Size and split primitives shared by all chunkers.

Oversized text is split in three steps, each only applied to the pieces the
previous one could not fit:

1. newline boundaries, packing consecutive lines greedily into a window
2. sentence boundaries (.!? followed by whitespace), packed the same way
3. token boundaries, using the tokenizer's encode/decode

Oversized tables are split row-wise; every fragment repeats the header line
and the separator line.

Usage:
    from ingestion.splitting import split_oversized_text, split_table

    pieces = split_oversized_text(long_text, budget=200, tokenizer=tokenizer)
    fragments = split_table(table, budget=200, tokenizer=tokenizer)
"""

from typing import Callable, Sequence

from .exceptions import IrreducibleContentError
from .models import Table
from .sentence_splitter import split_sentences
from .tokenizer import Tokenizer

REPLACEMENT_CHAR = "\ufffd"


def split_on_newline(text: str) -> list[str]:
    """
    Split text into lines that keep their line breaks.

    "".join(split_on_newline(text)) == text holds for every input.
    """
    if not text:
        return []
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def split_by_tokens(text: str, budget: int, tokenizer: Tokenizer) -> list[str]:
    """
    Hard split on token boundaries into windows of at most `budget` tokens.

    A window whose decoded text ends in a broken character (a multi-byte
    character spread over several tokens) is shortened until it ends on a
    whole character.
    """
    if budget < 1:
        raise ValueError(f"budget must be positive, got {budget}")

    tokens = tokenizer.encode(text)
    check_broken = REPLACEMENT_CHAR not in text
    pieces: list[str] = []
    start = 0

    while start < len(tokens):
        end = min(start + budget, len(tokens))
        piece = tokenizer.decode(tokens[start:end])
        while end - start > 1 and (
            (check_broken and piece.endswith(REPLACEMENT_CHAR))
            or tokenizer.count_tokens(piece.strip()) > budget
        ):
            end -= 1
            piece = tokenizer.decode(tokens[start:end])
        pieces.append(piece)
        start = end

    return pieces


def _split_lossless(
    text: str,
    budget: int,
    tokenizer: Tokenizer,
    level: int = 0,
) -> list[str]:
    """Greedy packing; returned pieces keep their whitespace."""
    if level == 0:
        pieces = split_on_newline(text)
    elif level == 1:
        pieces = split_sentences(text, keep_whitespace=True)
    else:
        return split_by_tokens(text, budget, tokenizer)

    def fits(candidate: str) -> bool:
        return tokenizer.count_tokens(candidate.strip()) <= budget

    windows: list[str] = []
    current = ""
    for piece in pieces:
        candidate = current + piece
        if fits(candidate):
            current = candidate
            continue

        if current.strip():
            windows.append(current)
        current = ""

        if fits(piece):
            current = piece
            continue

        fragments = _split_lossless(piece, budget, tokenizer, level + 1)
        if fragments:
            windows.extend(fragments[:-1])
            current = fragments[-1]

    if current.strip():
        windows.append(current)

    return windows


def split_oversized_text(text: str, budget: int, tokenizer: Tokenizer) -> list[str]:
    """
    Split text into pieces of at most `budget` tokens each.

    Args:
        text: Text to split.
        budget: Maximum tokens per piece.
        tokenizer: Tokenizer measuring the pieces.

    Returns:
        Stripped, non-empty pieces in their original order. Text that already
        fits comes back as a single piece.
    """
    if budget < 1:
        raise ValueError(f"budget must be positive, got {budget}")
    if not text or not text.strip():
        return []
    if tokenizer.count_tokens(text.strip()) <= budget:
        return [text.strip()]

    return [
        piece.strip()
        for piece in _split_lossless(text, budget, tokenizer)
        if piece.strip()
    ]


def pack_table_rows(
    prefix: str,
    rows: Sequence[str],
    fits: Callable[[str], bool],
) -> tuple[str, list[str]]:
    """
    Pack as many rows after the table prefix as `fits` accepts.

    Returns:
        The fragment (prefix plus packed rows) and the rows left over. The
        fragment is empty when not even the first row fits.
    """
    packed: list[str] = []
    for index, row in enumerate(rows):
        candidate = "\n".join([prefix, *packed, row])
        if not fits(candidate):
            if not packed:
                return "", list(rows)
            return "\n".join([prefix, *packed]), list(rows[index:])
        packed.append(row)
    return "\n".join([prefix, *packed]), []


def split_table(table: Table, budget: int, tokenizer: Tokenizer) -> list[str]:
    """
    Split a table row-wise into fragments of at most `budget` tokens.

    Raises:
        IrreducibleContentError: If the header line, separator line and one
            data row do not fit the budget together.
    """
    prefix = "\n".join(table.prefix_lines)
    rows = table.rows

    def fits(candidate: str) -> bool:
        return tokenizer.count_tokens(candidate) <= budget

    if not rows:
        if not fits(prefix):
            raise IrreducibleContentError(prefix, tokenizer.count_tokens(prefix), budget)
        return [prefix]

    fragments: list[str] = []
    while rows:
        fragment, rows = pack_table_rows(prefix, rows, fits)
        if not fragment:
            unit = f"{prefix}\n{rows[0]}"
            raise IrreducibleContentError(
                unit,
                tokenizer.count_tokens(unit),
                budget,
                details="table header, separator and first row",
            )
        fragments.append(fragment)

    return fragments
