"""Tests for the suffix-stripping stemmer."""

from __future__ import annotations

import pytest

from bayesian_text_classifier.stemmer import (
    consonant_flags,
    contains_vowel,
    ends_with_cvc,
    ends_with_double_consonant,
    measure,
    stem,
)


# ---------------------------------------------------------------------------
# Letter classes and measure
# ---------------------------------------------------------------------------


class TestConsonantFlags:
    def test_plain_vowels_and_consonants(self):
        assert consonant_flags("cat") == [True, False, True]

    def test_leading_y_is_consonant(self):
        assert consonant_flags("yes") == [True, False, True]

    def test_y_after_vowel_is_consonant(self):
        assert consonant_flags("toy") == [True, False, True]

    def test_y_after_consonant_is_vowel(self):
        assert consonant_flags("syzygy") == [True, False, True, False, True, False]

    def test_empty(self):
        assert consonant_flags("") == []

    def test_long_input_does_not_recurse(self):
        flags = consonant_flags("y" * 50_000)
        assert flags[0] is True
        assert flags[1] is False
        assert flags[-1] is False


class TestMeasure:
    @pytest.mark.parametrize("word", ["", "tr", "ee", "tree", "y", "by"])
    def test_measure_zero(self, word):
        assert measure(word) == 0

    @pytest.mark.parametrize("word", ["trouble", "oats", "trees", "ivy"])
    def test_measure_one(self, word):
        assert measure(word) == 1

    @pytest.mark.parametrize("word", ["troubles", "private", "oaten", "orrery"])
    def test_measure_two(self, word):
        assert measure(word) == 2


class TestEndingPredicates:
    def test_contains_vowel(self):
        assert contains_vowel("sk") is False
        assert contains_vowel("hap") is True
        assert contains_vowel("") is False

    def test_double_consonant(self):
        assert ends_with_double_consonant("hopp")
        assert ends_with_double_consonant("fall")
        assert not ends_with_double_consonant("tast")
        assert not ends_with_double_consonant("bee")
        assert not ends_with_double_consonant("s")

    def test_cvc(self):
        assert ends_with_cvc("hop")
        assert ends_with_cvc("fil")
        assert not ends_with_cvc("how")
        assert not ends_with_cvc("box")
        assert not ends_with_cvc("toy")
        assert not ends_with_cvc("hoop")
        assert not ends_with_cvc("at")


# ---------------------------------------------------------------------------
# Stemming
# ---------------------------------------------------------------------------

KNOWN_STEMS = [
    ("caresses", "caress"),
    ("ponies", "poni"),
    ("cats", "cat"),
    ("caress", "caress"),
    ("running", "run"),
    ("hopping", "hop"),
    ("hoping", "hope"),
    ("filing", "file"),
    ("motoring", "motor"),
    ("sing", "sing"),
    ("conflated", "conflat"),
    ("feed", "feed"),
    ("agreed", "agre"),
    ("happy", "happi"),
    ("sky", "sky"),
    ("relational", "relat"),
    ("conditional", "condit"),
    ("generalization", "gener"),
    ("hopeful", "hope"),
    ("goodness", "good"),
    ("electrical", "electr"),
    ("adjustment", "adjust"),
    ("controll", "control"),
    ("roll", "roll"),
]


class TestStem:
    @pytest.mark.parametrize("word,expected", KNOWN_STEMS)
    def test_known_stems(self, word, expected):
        assert stem(word) == expected

    @pytest.mark.parametrize(
        "root", ["run", "cat", "fast", "caress", "hope", "tree", "sky", "good", "adjust", "motor"]
    )
    def test_root_is_fixed_point(self, root):
        assert stem(root) == root

    def test_lowercases_input(self):
        assert stem("Running") == "run"
        assert stem("CARESSES") == "caress"

    def test_ss_ending_is_left_alone(self):
        assert stem("class") == "class"

    def test_eed_with_zero_measure_does_not_fall_through(self):
        # "feed" must not be treated as "fe" + "ed"
        assert stem("feed") == "feed"
        assert stem("bleed") == "bleed"

    def test_edge_inputs(self):
        assert stem("") == ""
        assert stem("s") == ""
        assert stem("a") == "a"

    def test_deterministic(self):
        assert stem("generalizations") == stem("generalizations")

    def test_long_word(self):
        word = "y" * 20_000 + "ing"
        assert isinstance(stem(word), str)
