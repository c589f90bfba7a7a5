"""Porter-style suffix-stripping stemmer.

Reduces an inflected English word to an approximate root by applying an
ordered set of suffix rules. Most rules are gated by the word's *measure*,
the number of vowel-run to consonant-run transitions in the stem that would
remain after removing the suffix.

A letter is a vowel if it is one of ``a e i o u``. The letter ``y`` is a
consonant at the start of a word, and otherwise takes the opposite class of
the letter before it (``toy`` ends in a consonant, ``by`` ends in a vowel).
Classes are computed in one left-to-right scan, so very long inputs are fine.

Processing order:
1. Plurals and third person (``sses``, ``ies``, ``ss``, ``s``)
2. Past tense and gerunds (``eed``, ``ed``, ``ing``) with cleanup
3. Terminal ``y`` to ``i``
4. First derivational table (``ational`` -> ``ate``, ...)
5. Second derivational table (``icate`` -> ``ic``, ...)
6. Suffix removal (``al``, ``ance``, ... ``ize``)
7. Terminal ``e`` removal
8. Terminal ``ll`` reduction

Example::

    >>> stem("caresses")
    'caress'
    >>> stem("running")
    'run'
"""

from __future__ import annotations

_VOWELS = frozenset("aeiou")

_STEP4_RULES: tuple[tuple[str, str], ...] = (
    ("ational", "ate"),
    ("tional", "tion"),
    ("enci", "ence"),
    ("anci", "ance"),
    ("izer", "ize"),
    ("abli", "able"),
    ("alli", "al"),
    ("entli", "ent"),
    ("eli", "e"),
    ("ousli", "ous"),
    ("ization", "ize"),
    ("ation", "ate"),
    ("ator", "ate"),
    ("alism", "al"),
    ("iveness", "ive"),
    ("fulness", "ful"),
    ("ousness", "ous"),
    ("aliti", "al"),
    ("iviti", "ive"),
    ("biliti", "ble"),
)

_STEP5_RULES: tuple[tuple[str, str], ...] = (
    ("icate", "ic"),
    ("ative", ""),
    ("alize", "al"),
    ("iciti", "ic"),
    ("ical", "ic"),
    ("ful", ""),
    ("ness", ""),
)

_STEP6_SUFFIXES: tuple[str, ...] = (
    "al", "ance", "ence", "er", "ic", "able", "ible", "ant",
    "ement", "ment", "ent", "ion", "ou", "ism", "ate",
    "iti", "ous", "ive", "ize",
)


# ---------------------------------------------------------------------------
# Letter classes and measure
# ---------------------------------------------------------------------------


def consonant_flags(word: str) -> list[bool]:
    """Classify every position of ``word``; ``True`` marks a consonant."""
    flags: list[bool] = []
    for i, char in enumerate(word):
        if char in _VOWELS:
            flags.append(False)
        elif char == "y":
            flags.append(True if i == 0 else not flags[i - 1])
        else:
            flags.append(True)
    return flags


def measure(word: str) -> int:
    """Count the consonant runs that follow a vowel run in ``word``.

    ``tree`` and ``by`` measure 0, ``trouble`` and ``oats`` measure 1,
    ``private`` and ``oaten`` measure 2.
    """
    count = 0
    in_vowel_run = False
    for is_consonant in consonant_flags(word):
        if is_consonant:
            if in_vowel_run:
                count += 1
                in_vowel_run = False
        else:
            in_vowel_run = True
    return count


def contains_vowel(word: str) -> bool:
    return not all(consonant_flags(word))


def ends_with_double_consonant(word: str) -> bool:
    """True if the last two letters are the same consonant (``-tt``, ``-ss``)."""
    if len(word) < 2 or word[-1] != word[-2]:
        return False
    flags = consonant_flags(word)
    return flags[-1] and flags[-2]


def ends_with_cvc(word: str) -> bool:
    """True for a consonant-vowel-consonant ending whose last letter is not w, x or y."""
    if len(word) < 3:
        return False
    flags = consonant_flags(word)
    if not (flags[-3] and not flags[-2] and flags[-1]):
        return False
    return word[-1] not in "wxy"


def _replace_suffix(word: str, suffix: str, replacement: str) -> str:
    return word[: len(word) - len(suffix)] + replacement


def _apply_rule_table(word: str, rules: tuple[tuple[str, str], ...]) -> str:
    """Apply the first rule whose suffix matches, if the remaining stem has m > 0."""
    for suffix, replacement in rules:
        if word.endswith(suffix):
            stem_part = word[: len(word) - len(suffix)]
            if measure(stem_part) > 0:
                return stem_part + replacement
            return word
    return word


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def _step_plurals(word: str) -> str:
    if word.endswith("sses"):
        return _replace_suffix(word, "sses", "ss")
    if word.endswith("ies"):
        return _replace_suffix(word, "ies", "i")
    if word.endswith("ss"):
        # "ss" is left as is; only guards against the bare "s" rule below
        return word
    if word.endswith("s"):
        return _replace_suffix(word, "s", "")
    return word


def _step_past_and_gerund(word: str) -> str:
    if word.endswith("eed"):
        stem_part = word[:-3]
        if measure(stem_part) > 0:
            return stem_part + "ee"
        return word

    if word.endswith("ed") and contains_vowel(word[:-2]):
        word = word[:-2]
    elif word.endswith("ing") and contains_vowel(word[:-3]):
        word = word[:-3]
    else:
        return word

    if word.endswith(("at", "bl", "iz")):
        return word + "e"
    if ends_with_double_consonant(word):
        return word[:-1]
    if measure(word) == 1 and ends_with_cvc(word):
        return word + "e"
    return word


def _step_terminal_y(word: str) -> str:
    if word.endswith("y") and contains_vowel(word[:-1]):
        return word[:-1] + "i"
    return word


def _step_remove_suffix(word: str) -> str:
    for suffix in _STEP6_SUFFIXES:
        if not word.endswith(suffix):
            continue
        stem_part = word[: len(word) - len(suffix)]
        if measure(stem_part) > 1:
            if suffix != "ion" or stem_part.endswith(("s", "t")):
                return stem_part
        return word
    return word


def _step_terminal_e(word: str) -> str:
    if not word.endswith("e"):
        return word
    stem_part = word[:-1]
    m = measure(stem_part)
    if m > 1 or (m == 1 and not ends_with_cvc(stem_part)):
        return stem_part
    return word


def _step_double_l(word: str) -> str:
    if word.endswith("l") and ends_with_double_consonant(word):
        stem_part = word[:-1]
        if measure(stem_part) > 1:
            return stem_part
    return word


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def stem(word: str) -> str:
    """Return the stemmed root of ``word``.

    The input is lower-cased first. The function is pure and deterministic
    and never raises for string input; the empty string stems to itself.

    Args:
        word: A single token.

    Returns:
        The stemmed token.
    """
    word = word.lower()

    word = _step_plurals(word)
    word = _step_past_and_gerund(word)
    word = _step_terminal_y(word)
    word = _apply_rule_table(word, _STEP4_RULES)
    word = _apply_rule_table(word, _STEP5_RULES)
    word = _step_remove_suffix(word)
    word = _step_terminal_e(word)
    word = _step_double_l(word)

    return word
