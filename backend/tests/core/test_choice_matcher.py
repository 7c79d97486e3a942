"""Choice Matching — tests for deterministic answer matching.

Tests cover:
    - Text match after normalization (case, articles, punctuation)
    - Letter labels are 0-indexed from 'a', digit labels 1-indexed from '1'
    - Labels outside the choice list never match
    - Empty choices never match
"""

import pytest

from daily_trivia.core.choice_matcher import label_index, matches_choice

CITIES = ["Paris", "London", "Rome"]


def test_matches_letter_label():
    assert matches_choice("b", CITIES) is True


def test_matches_digit_label():
    assert matches_choice("2", CITIES) is True


def test_matches_text_with_article():
    assert matches_choice("the paris", ["Paris"]) is True


def test_rejects_unlisted_text():
    assert matches_choice("Berlin", ["Paris"]) is False


@pytest.mark.parametrize("raw", ["(c)", "C.", " c ", "3.", "(3)"])
def test_label_decorations_are_stripped(raw):
    assert matches_choice(raw, CITIES) is True


@pytest.mark.parametrize("raw", ["d", "4", "z", "9"])
def test_label_out_of_range(raw):
    assert matches_choice(raw, CITIES) is False


def test_zero_is_not_a_label():
    assert matches_choice("0", CITIES) is False


def test_multi_character_input_is_not_a_label():
    assert matches_choice("ab", CITIES) is False


def test_text_match_takes_priority_over_label():
    assert matches_choice("A", ["A"]) is True


def test_single_letter_answer_matching_choice_text():
    # "a" normalizes to "a" (no trailing space, so no article strip) and is a label too
    assert matches_choice("a", ["Tokyo", "Osaka"]) is True


def test_empty_choices_never_match():
    assert matches_choice("a", []) is False
    assert matches_choice("Paris", []) is False


def test_blank_input_never_matches():
    assert matches_choice("   ", CITIES) is False
    assert matches_choice("", CITIES) is False


def test_label_index():
    assert label_index("a") == 0
    assert label_index("z") == 25
    assert label_index("1") == 0
    assert label_index("9") == 8
    assert label_index("0") is None
    assert label_index("é") is None
    assert label_index("") is None
