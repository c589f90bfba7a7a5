"""Feature extraction: word tokens, stopword removal, stemming and n-grams."""

from __future__ import annotations

import re
from collections.abc import Collection, Iterator
from functools import lru_cache

from .stemmer import stem

_NON_WORD_RE = re.compile(r"\W+")


@lru_cache(maxsize=65536)
def _cached_stem(token: str) -> str:
    return stem(token)


def tokenize(text: str, stopwords: Collection[str] = frozenset()) -> list[str]:
    """Split text into lower-case word tokens, dropping stopwords.

    Args:
        text: Raw document text.
        stopwords: Lower-case tokens to discard.

    Returns:
        Tokens in document order, not stemmed.
    """
    return [
        token
        for token in _NON_WORD_RE.split(text.lower())
        if token and token not in stopwords
    ]


def stemmed_tokens(text: str, stopwords: Collection[str] = frozenset()) -> list[str]:
    """Tokenize ``text`` and stem every remaining token."""
    return [_cached_stem(token) for token in tokenize(text, stopwords)]


def ngrams(tokens: list[str], n: int) -> list[str]:
    """Generate space-joined n-grams; windows that would overrun the end are skipped."""
    if n <= 1:
        return list(tokens)
    return [" ".join(tokens[i : i + n]) for i in range(len(tokens) - n + 1)]


def iter_features(
    text: str,
    stopwords: Collection[str] = frozenset(),
    depth: int = 1,
) -> Iterator[str]:
    """Lazily yield the features of ``text``; see ``extract_features``."""
    tokens = stemmed_tokens(text, stopwords)
    for n in range(1, depth + 1):
        yield from ngrams(tokens, n)


def extract_features(
    text: str,
    stopwords: Collection[str] = frozenset(),
    depth: int = 1,
) -> list[str]:
    """Extract the ordered feature sequence of a document.

    All unigrams come first, then all bigrams, up to n-grams of order
    ``depth``. Each n-gram joins consecutive stemmed tokens with a single
    space.

    Args:
        text: Raw document text.
        stopwords: Lower-case tokens removed before stemming.
        depth: Maximum n-gram order (1 = unigrams only).

    Returns:
        List of feature strings, recomputable from the same input.

    Example::

        >>> extract_features("Run run FAST", depth=2)
        ['run', 'run', 'fast', 'run run', 'run fast']
    """
    return list(iter_features(text, stopwords, depth))
