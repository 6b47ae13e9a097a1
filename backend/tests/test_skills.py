"""Tests for skill label matching."""

import pytest

from hiring_core.core.skills import SkillMatcher, clean_skills


class TestIsMatch:

    @pytest.mark.parametrize(
        "label", ["react", "Python", "node.js", "C++", "amazon web services", "Straße", "ﬁx", "Ærø"]
    )
    def test_reflexive_under_case_change(self, skill_matcher, label):
        assert skill_matcher.is_match(label, label.upper())

    def test_synonyms_match_in_both_directions(self, skill_matcher):
        assert skill_matcher.is_match("react", "javascript")
        assert skill_matcher.is_match("javascript", "react")

    def test_synonym_lookup_ignores_case(self, skill_matcher):
        assert skill_matcher.is_match("Django", "PYTHON")

    def test_fuzzy_match_tolerates_a_typo(self, skill_matcher):
        assert skill_matcher.is_match("kubernets", "kubernetes")

    def test_fuzzy_threshold_is_strict(self, skill_matcher):
        # 4 of 5 characters equal -> similarity exactly 0.8, not above it
        assert not skill_matcher.is_match("abcde", "abcdx")

    def test_unrelated_skills_do_not_match(self, skill_matcher):
        assert not skill_matcher.is_match("java", "javascript")
        assert not skill_matcher.is_match("css", "react")

    @pytest.mark.parametrize("candidate,job", [
        (None, "python"),
        ("python", None),
        ("", "python"),
        ("   ", "python"),
        (42, "python"),
        ("python", ["python"]),
    ])
    def test_malformed_input_is_never_a_match(self, skill_matcher, candidate, job):
        assert skill_matcher.is_match(candidate, job) is False

    def test_injected_synonym_table(self):
        matcher = SkillMatcher(synonyms={"golang": ["go"]})
        assert matcher.is_match("go", "Golang")
        assert not matcher.is_match("react", "javascript")


class TestSkillLists:

    def test_matching_and_missing_skills(self, skill_matcher):
        candidate = ["JavaScript", "CSS"]
        job = ["javascript", "graphql"]
        assert skill_matcher.matching_skills(candidate, job) == ["JavaScript"]
        assert skill_matcher.missing_skills(candidate, job) == ["graphql"]

    def test_count_covered(self, skill_matcher):
        assert skill_matcher.count_covered(["python", "mysql"], ["python", "sql", "go"]) == 2

    def test_clean_skills_drops_malformed_entries(self):
        assert clean_skills([" python ", None, "", 3, "sql", "  "]) == ["python", "sql"]

    @pytest.mark.parametrize("value", [None, "python", []])
    def test_clean_skills_non_list_input(self, value):
        assert clean_skills(value) == []
