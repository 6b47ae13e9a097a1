"""Tests for edit-distance similarity."""

import pytest

from hiring_core.core.similarity import levenshtein_distance, string_similarity


class TestLevenshteinDistance:

    @pytest.mark.parametrize("first,second,expected", [
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("", "abc", 3),
        ("abc", "", 3),
        ("same", "same", 0),
    ])
    def test_known_distances(self, first, second, expected):
        assert levenshtein_distance(first, second) == expected

    def test_distance_is_symmetric(self):
        assert levenshtein_distance("javascript", "java") == levenshtein_distance("java", "javascript")


class TestStringSimilarity:

    def test_empty_strings_are_identical(self):
        assert string_similarity("", "") == 1.0

    def test_empty_against_non_empty_is_zero(self):
        assert string_similarity("abc", "") == 0.0
        assert string_similarity("", "abc") == 0.0

    def test_one_typo_in_ten_characters(self):
        assert string_similarity("javascript", "javascrpt") == pytest.approx(0.9)

    def test_identical_strings(self):
        assert string_similarity("python", "python") == 1.0

    @pytest.mark.parametrize("first,second", [
        ("react", "redux"),
        ("kubernetes", "k8s"),
        ("abc", "abd"),
    ])
    def test_symmetric(self, first, second):
        assert string_similarity(first, second) == string_similarity(second, first)

    def test_result_is_within_unit_interval(self):
        for first, second in [("a", "zzzz"), ("golang", "go"), ("x", "x")]:
            assert 0.0 <= string_similarity(first, second) <= 1.0
