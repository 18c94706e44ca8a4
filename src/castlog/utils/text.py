"""Bag-of-words text comparison."""

import math
import re

_NON_WORD = re.compile(r"\W+")


def words(text: str) -> list[str]:
    """Split text into lower-case words with punctuation removed.

    Tokens that consist only of punctuation are dropped.
    """
    out = []
    for token in text.lower().split():
        word = _NON_WORD.sub("", token)
        if word:
            out.append(word)
    return out


def similarity(a: str, b: str) -> float:
    """Compute the Otsuka-Ochiai coefficient for the words in a and b.

    The result is in [0, 1]. Two texts without words are identical (1.0);
    a text without words shares nothing with one that has words (0.0).

    Examples:
        >>> similarity("a b c", "c b a")
        1.0
        >>> similarity("a b", "b c")
        0.5
    """
    wa = set(words(a))
    wb = set(words(b))
    if not wa and not wb:
        return 1.0
    if not wa or not wb:
        return 0.0
    return len(wa & wb) / math.sqrt(len(wa) * len(wb))


def contains_word(text: str, word: str) -> bool:
    """Report whether text contains word, ignoring case and punctuation."""
    return _NON_WORD.sub("", word.lower()) in words(text)
