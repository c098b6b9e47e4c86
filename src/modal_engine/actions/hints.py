"""Label arithmetic for hint selection."""

from __future__ import annotations


def hint_width(count: int, symbols: str) -> int:
    """Number of symbols each label needs to tell ``count`` targets apart."""

    if count <= 0:
        return 0
    if len(symbols) < 2:
        raise ValueError("hint alphabets need at least two symbols")
    width = 1
    # smallest width with base ** width >= count
    while len(symbols) ** width < count:
        width += 1
    return width


def hint_label(index: int, width: int, symbols: str) -> str:
    """Fixed-width label for ``index``, padded with the first symbol."""

    if index < 0:
        raise ValueError("index cannot be negative")
    base = len(symbols)
    chars = [symbols[0]] * width
    position = width - 1
    while index:
        if position < 0:
            raise ValueError(f"index does not fit in {width} symbols")
        index, remainder = divmod(index, base)
        chars[position] = symbols[remainder]
        position -= 1
    return "".join(chars)


def hint_labels(count: int, symbols: str) -> list[str]:
    width = hint_width(count, symbols)
    return [hint_label(index, width, symbols) for index in range(count)]


__all__ = ["hint_width", "hint_label", "hint_labels"]
