"""
Skill label equivalence.

Decides whether a candidate's skill label and a job's skill label name the
same competency. The synonym table encodes ecosystem adjacency
("react" counts for "javascript"), not strict equivalence, so it will
report some false positives on purpose.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .similarity import string_similarity
from . import tables

FUZZY_MATCH_THRESHOLD = 0.8


class SkillMatcher:
    """
    Case-insensitive, synonym-aware, typo-tolerant skill comparison.

    Matching order (first hit wins):
        1. Missing, empty or non-string input -> no match
        2. Equality after Unicode case folding ("Straße" == "STRASSE")
        3. Either label is listed as a synonym of the other
        4. String similarity above FUZZY_MATCH_THRESHOLD

    Example:
        >>> matcher = SkillMatcher()
        >>> matcher.is_match("React", "javascript")
        True
        >>> matcher.is_match("kubernets", "kubernetes")
        True
    """

    def __init__(
        self,
        synonyms: Optional[Mapping[str, Sequence[str]]] = None,
        fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
    ):
        source = synonyms if synonyms is not None else tables.skill_synonyms()
        self._synonyms = {
            key.casefold(): frozenset(alias.casefold() for alias in aliases)
            for key, aliases in source.items()
        }
        self.fuzzy_threshold = fuzzy_threshold

    def is_match(self, candidate_skill: Any, job_skill: Any) -> bool:
        """Return True when both labels refer to the same competency."""
        if not isinstance(candidate_skill, str) or not isinstance(job_skill, str):
            return False

        candidate_key = candidate_skill.strip().casefold()
        job_key = job_skill.strip().casefold()
        if not candidate_key or not job_key:
            return False

        if candidate_key == job_key:
            return True

        if candidate_key in self._synonyms.get(job_key, ()):
            return True
        if job_key in self._synonyms.get(candidate_key, ()):
            return True

        return string_similarity(candidate_key, job_key) > self.fuzzy_threshold

    def has_match(self, candidate_skills: Iterable[Any], job_skill: Any) -> bool:
        """True when any candidate skill matches the job skill."""
        return any(self.is_match(skill, job_skill) for skill in candidate_skills)

    def matching_skills(self, candidate_skills: Iterable[Any], job_skills: Iterable[Any]) -> List[str]:
        """Candidate skills that satisfy at least one job skill."""
        job_list = clean_skills(job_skills)
        return [
            skill for skill in clean_skills(candidate_skills)
            if any(self.is_match(skill, job_skill) for job_skill in job_list)
        ]

    def missing_skills(self, candidate_skills: Iterable[Any], job_skills: Iterable[Any]) -> List[str]:
        """Job skills that no candidate skill satisfies."""
        candidate_list = clean_skills(candidate_skills)
        return [
            job_skill for job_skill in clean_skills(job_skills)
            if not self.has_match(candidate_list, job_skill)
        ]

    def count_covered(self, candidate_skills: Iterable[Any], job_skills: Iterable[Any]) -> int:
        """Number of job skills covered by the candidate."""
        candidate_list = clean_skills(candidate_skills)
        return sum(1 for job_skill in job_skills if self.has_match(candidate_list, job_skill))


def clean_skills(skills: Optional[Iterable[Any]]) -> List[str]:
    """Drop malformed entries (non-strings, blanks) and strip whitespace."""
    if not skills or isinstance(skills, str):
        return []
    return [skill.strip() for skill in skills if isinstance(skill, str) and skill.strip()]
