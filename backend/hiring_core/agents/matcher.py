"""
Match Score Agent

Responsibility: Score how well a candidate profile fits a job.
Single purpose: Produce one bounded 0-100 match score with its breakdown.

This agent does NOT rank or filter candidates - only calculates scores.
The cultural fit and success probability components are placeholder
heuristics with no empirical validation; their arithmetic is kept stable
so scores stay comparable across releases.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .base import AgentResult, BaseAgent, ScoringState
from ..core import tables
from ..core.exceptions import InvalidConfigurationError
from ..core.metrics import round_half_up
from ..core.skills import SkillMatcher, clean_skills
from ..schemas.candidates import CandidateSnapshot, MatchResult
from ..schemas.job import JobSnapshot

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0
DEFAULT_EDUCATION_LEVEL = 3
DEFAULT_JOB_LEVEL = 3

# Degree abbreviations tried after the plain keyword search, highest first
EDUCATION_ABBREVIATIONS: Tuple[Tuple[str, int], ...] = (
    (r"\bphd\b|\bdoctorate\b", 5),
    (r"\bmasters?\b|\bmsc\b|\bma\b|\bms\b", 4),
    (r"\bbachelor\b|\bbs?c\b|\bba\b|\bbsc\b", 3),
    (r"\bassociate\b|\bassoc\b|\baa\b", 2),
    (r"\bhigh school\b|\bhs\b", 1),
)


@dataclass
class MatchInput:
    """Input for the match score agent."""
    candidate: CandidateSnapshot
    job: JobSnapshot


# =============================================================================
# LEVEL HEURISTICS
# =============================================================================

def _education_texts(education: Any) -> List[str]:
    """Flatten free text, degree records or lists of either into strings."""
    texts: List[str] = []
    entries = education if isinstance(education, (list, tuple)) else [education]
    for entry in entries:
        if not entry:
            continue
        if isinstance(entry, str):
            texts.append(entry)
        elif isinstance(entry, Mapping):
            for key in ("degree", "field_of_study", "fieldOfStudy", "institution"):
                if entry.get(key):
                    texts.append(str(entry[key]))
        else:
            texts.append(str(entry))
    return texts


def education_level(education: Any, levels: Optional[Mapping[str, int]] = None) -> int:
    """
    Ordinal education level from 1 (high school) to 5 (doctorate).

    Plain keywords are searched first in table order, then common degree
    abbreviations. Unknown or missing education counts as a bachelor's (3).
    """
    if not education:
        return DEFAULT_EDUCATION_LEVEL

    combined = " ".join(_education_texts(education)).lower()
    if levels is None:
        levels = tables.match_weights()["education_levels"]

    for keyword, level in levels.items():
        if keyword in combined:
            return int(level)

    for pattern, level in EDUCATION_ABBREVIATIONS:
        if re.search(pattern, combined):
            return level

    return DEFAULT_EDUCATION_LEVEL


def job_level(title: Optional[str], level_rules: Optional[Sequence[Mapping[str, Any]]] = None) -> int:
    """Ordinal seniority from the title: 4 senior/lead/principal, 3 mid, 2 junior/entry."""
    if not title:
        return DEFAULT_JOB_LEVEL
    title_lower = title.lower()
    if level_rules is None:
        level_rules = tables.match_weights()["job_levels"]
    for rule in level_rules:
        if any(keyword in title_lower for keyword in rule["keywords"]):
            return int(rule["level"])
    return DEFAULT_JOB_LEVEL


def _years(value: Any) -> float:
    """Coerce an experience value to a non-negative float; junk becomes 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        years = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(years) or years < 0:
        return 0.0
    return years


# =============================================================================
# AGENT
# =============================================================================

class MatchScoreAgent(BaseAgent[MatchInput, MatchResult]):
    """
    Scores a candidate against a job on four dimensions.

    Input: CandidateSnapshot + JobSnapshot
    Output: MatchResult with the blended score and each component

    Components (weights from the match_weights table):
    - Technical match (50%): required skills 70 points, nice-to-have 30
    - Experience fit (20%): rewards moderate over-qualification
    - Cultural fit (15%): education level vs. job seniority heuristic
    - Success probability (15%): skills, experience and employment heuristic

    Missing fields fall back to neutral values; nothing here raises on
    partial data.
    """

    name = "match_scorer"
    description = (
        "Scores candidate-job fit from skills, experience and two "
        "placeholder heuristics, with matching and missing skills."
    )

    def __init__(
        self,
        agent_id: Optional[str] = None,
        skill_matcher: Optional[SkillMatcher] = None,
        weights: Optional[Mapping[str, float]] = None,
    ):
        super().__init__(agent_id)
        self.skill_matcher = skill_matcher or SkillMatcher()

        table = tables.match_weights()
        self.weights = dict(weights if weights is not None else table["weights"])
        self.technical_split = dict(table["technical_split"])
        self.education_levels = dict(table["education_levels"])
        self.job_levels = table["job_levels"]

        total = sum(self.weights.get(k, 0.0) for k in ("technical", "experience", "cultural", "success"))
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise InvalidConfigurationError(
                [f"Match score weights must sum to 1.0, currently sum to {total:g}"],
                message="Invalid match score weights",
            )

    # -------------------------------------------------------------------------
    # Agent contract
    # -------------------------------------------------------------------------

    def run(
        self,
        input_data: MatchInput,
        state: Optional[ScoringState] = None
    ) -> AgentResult[MatchResult]:
        """
        Execute matching and return result.

        Args:
            input_data: MatchInput with candidate and job snapshots
            state: Optional scoring state

        Returns:
            AgentResult with MatchResult and updated state
        """
        if state is None:
            state = ScoringState()

        try:
            result, confidence, explanation, trace = self._process(input_data)
        except Exception as e:
            logger.exception("Matching failed for candidate %s", getattr(input_data.candidate, "candidate_id", "?"))
            return self._failure(
                state=state,
                error=str(e),
                explanation=f"Matching failed: {e}",
            )

        agent_result = self._success(
            output=result,
            state=state,
            confidence=confidence,
            explanation=explanation,
            metadata={"reasoning": trace},
        )
        new_state = agent_result.state.with_decision(
            decision_type="match_score",
            decision=str(result.match_score),
            reasoning=explanation,
            confidence=confidence,
            agent_name=self.name,
        )
        return AgentResult(response=agent_result.response, state=new_state)

    def _process(self, input_data: MatchInput) -> Tuple[MatchResult, float, str, List[str]]:
        """
        Score one candidate against one job.

        Returns:
            MatchResult, confidence_score, explanation, reasoning trace
        """
        candidate, job = input_data.candidate, input_data.job
        trace: List[str] = []
        self.log_reasoning(trace, f"Matching candidate {candidate.candidate_id[:8]} to job {job.job_id[:8]}")

        result = self.score(candidate, job)
        self.log_reasoning(trace, f"Technical match: {result.technical_match:.1f}")
        self.log_reasoning(trace, f"Experience fit: {result.experience_fit:.1f}")
        self.log_reasoning(trace, f"Cultural fit: {result.cultural_fit:.1f}")
        self.log_reasoning(trace, f"Success probability: {result.success_probability:.1f}")
        self.log_reasoning(trace, f"Overall match score: {result.match_score}")

        confidence = self._calculate_confidence(candidate, job)

        required_total = len(clean_skills(job.required_skills))
        required_met = required_total - len(result.missing_skills)
        explanation = (
            f"Match score {result.match_score}/100. "
            f"Technical: {result.technical_match:.0f} ({required_met}/{required_total} required met), "
            f"Experience: {result.experience_fit:.0f}, Cultural: {result.cultural_fit:.0f}, "
            f"Success: {result.success_probability:.0f}."
        )
        return result, confidence, explanation, trace

    # -------------------------------------------------------------------------
    # Scoring API
    # -------------------------------------------------------------------------

    def score(self, candidate: CandidateSnapshot, job: JobSnapshot) -> MatchResult:
        """Full match result for one candidate/job pair."""
        candidate_skills = clean_skills(candidate.skills)
        required = clean_skills(job.required_skills)
        nice_to_have = clean_skills(job.nice_to_have_skills)

        technical = self.technical_match(candidate_skills, required, nice_to_have)
        experience = self.experience_fit(candidate, job)
        cultural = self.cultural_fit(candidate, job)
        success = self.success_probability(candidate, job)

        return MatchResult(
            candidate_id=candidate.candidate_id,
            job_id=job.job_id,
            match_score=self._blend(technical, experience, cultural, success),
            technical_match=technical,
            experience_fit=experience,
            cultural_fit=cultural,
            success_probability=success,
            matching_skills=self.skill_matcher.matching_skills(candidate_skills, required),
            missing_skills=self.skill_matcher.missing_skills(candidate_skills, required),
        )

    def match_score(
        self,
        candidate_skills: Sequence[Any],
        job_required_skills: Sequence[Any],
        job_nice_to_have_skills: Sequence[Any],
        candidate: Optional[CandidateSnapshot] = None,
        job: Optional[JobSnapshot] = None,
    ) -> int:
        """
        Blended 0-100 match score.

        Skill lists are passed separately so callers can score a skill set
        without a full profile; candidate and job supply the softer
        components and may be omitted (neutral values are used).
        """
        technical = self.technical_match(candidate_skills, job_required_skills, job_nice_to_have_skills)
        return self._blend(
            technical,
            self.experience_fit(candidate, job),
            self.cultural_fit(candidate, job),
            self.success_probability(candidate, job),
        )

    def technical_match(
        self,
        candidate_skills: Sequence[Any],
        required_skills: Sequence[Any],
        nice_to_have_skills: Sequence[Any],
    ) -> float:
        """
        Skill coverage score (0-100).

        An empty bucket contributes nothing rather than dividing by zero.
        """
        candidate_list = clean_skills(candidate_skills)
        required = clean_skills(required_skills)
        nice = clean_skills(nice_to_have_skills)

        required_matches = self.skill_matcher.count_covered(candidate_list, required)
        nice_matches = self.skill_matcher.count_covered(candidate_list, nice)

        required_score = required_matches / max(len(required), 1) * self.technical_split["required"]
        nice_score = nice_matches / max(len(nice), 1) * self.technical_split["nice_to_have"]

        return min(required_score + nice_score, 100.0)

    def experience_fit(self, candidate: Optional[CandidateSnapshot], job: Optional[JobSnapshot]) -> float:
        """
        Experience score (0-100).

        Meeting the requirement scores 80, with up to 10 more points for
        over-qualification (capped at 50% over). Falling short loses 50
        points per 100% of the requirement missed.
        """
        candidate_exp = _years(getattr(candidate, "years_experience", 0))
        required_exp = _years(getattr(job, "experience_required", 0))
        if not candidate_exp or not required_exp:
            return NEUTRAL_SCORE

        if candidate_exp >= required_exp:
            over_qualification = min((candidate_exp - required_exp) / required_exp, 0.5)
            return min(100.0, 80 + over_qualification * 20)

        under_qualification = (required_exp - candidate_exp) / required_exp
        return max(0.0, 100 - under_qualification * 50)

    def cultural_fit(self, candidate: Optional[CandidateSnapshot], job: Optional[JobSnapshot]) -> float:
        """
        Education level vs. job seniority (0-100).

        Levels within one step add 20, more than two steps apart subtract 20.
        """
        score = NEUTRAL_SCORE
        education = getattr(candidate, "education", None)
        title = getattr(job, "title", None)

        if education and title:
            gap = abs(education_level(education, self.education_levels) - job_level(title, self.job_levels))
            if gap <= 1:
                score += 20
            elif gap > 2:
                score -= 20

        return max(0.0, min(100.0, score))

    def success_probability(self, candidate: Optional[CandidateSnapshot], job: Optional[JobSnapshot]) -> float:
        """
        Heuristic chance of success in the role (0-100).

        Starts at 50, then:
        - skill alignment moves it by up to +/-15
        - experience ratio adds 20 (>= 1), 10 (>= 0.7) or takes 10
        - a current employer adds 10
        """
        probability = NEUTRAL_SCORE

        if candidate is not None and job is not None:
            candidate_skills = clean_skills(candidate.skills)
            required = clean_skills(job.required_skills)
            if candidate_skills:
                aligned = sum(
                    1 for skill in candidate_skills
                    if any(self.skill_matcher.is_match(skill, req) for req in required)
                )
                ratio = aligned / max(len(required), 1)
                probability += (ratio - 0.5) * 30

        candidate_exp = _years(getattr(candidate, "years_experience", 0))
        required_exp = _years(getattr(job, "experience_required", 0))
        if candidate_exp and required_exp:
            exp_ratio = candidate_exp / max(required_exp, 1)
            if exp_ratio >= 1:
                probability += 20
            elif exp_ratio >= 0.7:
                probability += 10
            else:
                probability -= 10

        current_company = getattr(candidate, "current_company", None)
        if isinstance(current_company, str) and current_company.strip():
            probability += 10

        return max(0.0, min(100.0, probability))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _blend(self, technical: float, experience: float, cultural: float, success: float) -> int:
        total = (
            technical * self.weights["technical"]
            + experience * self.weights["experience"]
            + cultural * self.weights["cultural"]
            + success * self.weights["success"]
        )
        return max(0, min(round_half_up(total), 100))

    def _calculate_confidence(self, candidate: CandidateSnapshot, job: JobSnapshot) -> float:
        """Share of the heuristics that ran on real data instead of neutral fallbacks."""
        signals = [
            bool(clean_skills(candidate.skills)),
            bool(clean_skills(job.required_skills) or clean_skills(job.nice_to_have_skills)),
            bool(_years(candidate.years_experience) and _years(job.experience_required)),
            bool(candidate.education and job.title),
        ]
        return 0.5 + 0.125 * sum(signals)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} weights={self.weights!r}>"
