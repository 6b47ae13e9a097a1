"""Tests for the match score agent."""

import pytest

from hiring_core.agents.base import AgentStatus, ScoringState
from hiring_core.agents.matcher import MatchInput, MatchScoreAgent, education_level, job_level
from hiring_core.core.exceptions import InvalidConfigurationError
from hiring_core.core.skills import SkillMatcher
from hiring_core.schemas import CandidateSnapshot, JobSnapshot


class TestTechnicalMatch:

    def test_empty_required_bucket_contributes_nothing(self, match_agent):
        assert match_agent.technical_match(["python"], [], []) == 0.0

    def test_required_only(self, match_agent):
        assert match_agent.technical_match(["python", "sql"], ["python", "sql"], []) == 70.0

    def test_full_coverage_is_capped_at_100(self, match_agent):
        assert match_agent.technical_match(["python", "aws"], ["python"], ["aws"]) == 100.0

    def test_malformed_skills_are_filtered(self, match_agent):
        score = match_agent.technical_match(["python", None, 5, "  "], ["python", "", None], [])
        assert score == 70.0


class TestExperienceFit:

    @pytest.mark.parametrize("candidate_exp,required_exp,expected", [
        (3, 2, 90.0),     # 50% over, bonus capped
        (5, 4, 85.0),     # 25% over
        (4, 4, 80.0),
        (1, 4, 62.5),     # 75% short
        (0, 4, 50.0),     # unknown candidate experience
        (4, 0, 50.0),     # unspecified requirement
    ])
    def test_experience_fit(self, match_agent, candidate_exp, required_exp, expected):
        candidate = CandidateSnapshot(years_experience=candidate_exp)
        job = JobSnapshot(experience_required=required_exp)
        assert match_agent.experience_fit(candidate, job) == pytest.approx(expected)

    def test_missing_profiles_are_neutral(self, match_agent):
        assert match_agent.experience_fit(None, None) == 50.0

    def test_junk_experience_is_neutral(self, match_agent):
        candidate = CandidateSnapshot(years_experience="lots")
        assert match_agent.experience_fit(candidate, JobSnapshot(experience_required=3)) == 50.0


class TestLevels:

    @pytest.mark.parametrize("education,expected", [
        (None, 3),
        ("", 3),
        ("Doctorate in Chemistry", 5),
        ("MS in CS", 4),
        ("BSc Computer Science", 3),
        ("Associate degree", 2),
        ("High school diploma", 1),
        ("Self taught", 3),
        ([{"degree": "PhD", "field_of_study": "Physics"}], 5),
        (["Bachelor of Arts", "Certificate"], 3),
    ])
    def test_education_level(self, education, expected):
        assert education_level(education) == expected

    @pytest.mark.parametrize("title,expected", [
        ("Lead Engineer", 4),
        ("Principal Architect", 4),
        ("Intermediate Designer", 3),
        ("Entry Level Analyst", 2),
        ("Engineer", 3),
        (None, 3),
    ])
    def test_job_level(self, title, expected):
        assert job_level(title) == expected


class TestCulturalFit:

    @pytest.mark.parametrize("education,title,expected", [
        ("Master of Science", "Senior Engineer", 70.0),       # 4 vs 4
        ("BSc Computer Science", "Junior Developer", 70.0),   # 3 vs 2
        ("Associate degree", "Senior Engineer", 50.0),        # 2 vs 4
        ("High school diploma", "Principal Architect", 30.0), # 1 vs 4
    ])
    def test_level_gap(self, match_agent, education, title, expected):
        candidate = CandidateSnapshot(education=education)
        job = JobSnapshot(title=title)
        assert match_agent.cultural_fit(candidate, job) == expected

    def test_no_education_is_neutral(self, match_agent):
        assert match_agent.cultural_fit(CandidateSnapshot(), JobSnapshot(title="Senior Engineer")) == 50.0


class TestSuccessProbability:

    def test_all_signals_positive(self, match_agent):
        candidate = CandidateSnapshot(skills=["python", "sql"], years_experience=5, current_company="Acme")
        job = JobSnapshot(required_skills=["python", "sql"], experience_required=4)
        assert match_agent.success_probability(candidate, job) == pytest.approx(95.0)

    def test_partial_skill_alignment(self, match_agent):
        candidate = CandidateSnapshot(skills=["python"])
        job = JobSnapshot(required_skills=["python", "java", "go"])
        assert match_agent.success_probability(candidate, job) == pytest.approx(45.0)

    @pytest.mark.parametrize("candidate_exp,expected", [(3, 60.0), (2, 40.0)])
    def test_experience_ratio_bands(self, match_agent, candidate_exp, expected):
        candidate = CandidateSnapshot(years_experience=candidate_exp)
        job = JobSnapshot(experience_required=4)
        # No candidate skills: only the experience band applies
        assert match_agent.success_probability(candidate, job) == pytest.approx(expected)

    def test_blank_company_is_not_employment(self, match_agent):
        assert match_agent.success_probability(CandidateSnapshot(current_company="  "), JobSnapshot()) == 50.0

    def test_missing_profiles_are_neutral(self, match_agent):
        assert match_agent.success_probability(None, None) == 50.0


class TestMatchScore:

    def test_everything_empty(self, match_agent):
        # technical 0, the other three neutral: 10 + 7.5 + 7.5
        assert match_agent.match_score([], [], []) == 25

    @pytest.mark.parametrize("candidate_skills,required,nice,exp,required_exp", [
        ([], [], [], 0, 0),
        (["python"], ["python"], ["aws"], 30, 1),
        (["cobol"], ["python", "go", "rust"], [], 0.5, 15),
        ([None, 7], ["python"], [None], -3, 2),
        (["python", "sql", "docker", "aws"], ["python", "sql"], ["docker"], 10, 5),
    ])
    def test_always_an_integer_within_bounds(
        self, match_agent, candidate_skills, required, nice, exp, required_exp
    ):
        candidate = CandidateSnapshot(
            skills=candidate_skills, years_experience=exp, education="PhD", current_company="Acme"
        )
        job = JobSnapshot(
            title="Junior Developer",
            required_skills=required,
            nice_to_have_skills=nice,
            experience_required=required_exp,
        )
        score = match_agent.match_score(candidate_skills, required, nice, candidate, job)
        assert isinstance(score, int)
        assert 0 <= score <= 100

    def test_worked_example_without_synonym_adjacency(self):
        agent = MatchScoreAgent(skill_matcher=SkillMatcher(synonyms={}))
        candidate = CandidateSnapshot(skills=["javascript", "css"], years_experience=3)
        job = JobSnapshot(
            required_skills=["javascript", "react"],
            nice_to_have_skills=["css"],
            experience_required=2,
        )

        result = agent.score(candidate, job)

        assert result.technical_match == pytest.approx(65.0)
        assert result.experience_fit >= 80
        assert result.match_score == 69
        assert result.matching_skills == ["javascript"]
        assert result.missing_skills == ["react"]

    def test_worked_example_is_deterministic(self, match_agent):
        candidate = CandidateSnapshot(skills=["javascript", "css"], years_experience=3)
        job = JobSnapshot(
            required_skills=["javascript", "react"],
            nice_to_have_skills=["css"],
            experience_required=2,
        )
        scores = {match_agent.score(candidate, job).match_score for _ in range(5)}
        assert len(scores) == 1

    def test_react_counts_as_javascript_adjacent_with_default_table(self, match_agent):
        candidate = CandidateSnapshot(skills=["javascript", "css"], years_experience=3)
        job = JobSnapshot(
            required_skills=["javascript", "react"],
            nice_to_have_skills=["css"],
            experience_required=2,
        )
        result = match_agent.score(candidate, job)
        assert result.technical_match == 100.0
        assert result.missing_skills == []
        assert result.match_score == 86

    def test_strong_candidate(self, match_agent, strong_candidate, senior_python_job):
        result = match_agent.score(strong_candidate, senior_python_job)
        assert result.candidate_id == "cand-strong"
        assert result.job_id == "job-senior-py"
        assert result.match_score >= 80
        assert "Python" in result.matching_skills

    def test_invalid_weights_are_rejected(self):
        with pytest.raises(InvalidConfigurationError) as excinfo:
            MatchScoreAgent(weights={"technical": 0.5, "experience": 0.5, "cultural": 0.5, "success": 0.0})
        assert "sum to 1.0" in str(excinfo.value)


class TestMatchAgentRun:

    def test_run_records_output_and_decision(self, match_agent, strong_candidate, senior_python_job):
        result = match_agent.run(MatchInput(candidate=strong_candidate, job=senior_python_job))

        assert result.response.is_successful()
        assert result.response.confidence_score == 1.0
        assert result.state.has_agent_run("match_scorer")
        assert len(result.state.get_decisions_by_type("match_score")) == 1
        assert result.response.metadata["reasoning"]

    def test_sparse_profile_lowers_confidence(self, match_agent):
        result = match_agent.run(MatchInput(candidate=CandidateSnapshot(), job=JobSnapshot()))
        assert result.response.is_successful()
        assert result.response.confidence_score == 0.5

    def test_run_never_raises(self, match_agent, senior_python_job):
        state = ScoringState()
        result = match_agent.run(MatchInput(candidate=None, job=senior_python_job), state)

        assert result.response.status == AgentStatus.FAILURE
        assert result.response.output is None
        assert result.state.errors
        assert not state.errors
