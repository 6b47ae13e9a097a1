"""Shared fixtures for the hiring core tests."""

from datetime import datetime, timedelta, timezone

import pytest

from hiring_core.agents.bias_analyzer import BiasAnalyzerAgent
from hiring_core.agents.matcher import MatchScoreAgent
from hiring_core.agents.pipeline_health import PipelineHealthAgent
from hiring_core.core.config import reset_settings
from hiring_core.core.skills import SkillMatcher
from hiring_core.schemas import (
    ApplicationSnapshot,
    CandidateSnapshot,
    JobSnapshot,
    OrganizationSnapshot,
)

AS_OF = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test starts and ends with freshly loaded settings and tables."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def skill_matcher():
    return SkillMatcher()


@pytest.fixture
def match_agent():
    return MatchScoreAgent()


@pytest.fixture
def bias_agent():
    return BiasAnalyzerAgent()


@pytest.fixture
def health_agent():
    return PipelineHealthAgent()


@pytest.fixture
def senior_python_job():
    return JobSnapshot(
        job_id="job-senior-py",
        title="Senior Python Engineer",
        required_skills=["python", "sql", "docker"],
        nice_to_have_skills=["aws", "react"],
        experience_required=4,
        description="We are excited to grow our collaborative team.",
    )


@pytest.fixture
def strong_candidate():
    return CandidateSnapshot(
        candidate_id="cand-strong",
        name="Asha Patel",
        skills=["Python", "PostgreSQL", "Kubernetes", "AWS"],
        years_experience=6,
        education=[{"degree": "Master of Science", "field_of_study": "Computer Science"}],
        current_company="Acme",
    )


@pytest.fixture
def make_snapshot():
    """
    Build an organization snapshot from simple counts.

    Jobs are posted 2024-04-20; recent applications are created one day
    before AS_OF; each hire is filled 33 days after posting.
    """
    def _make(
        candidate_names=("Asha Patel", "Wei Chen", "John Smith", "Jane Doe"),
        open_jobs=2,
        closed_jobs=1,
        recent_applications=18,
        hires=1,
        organization_id="org-1",
    ):
        posted = datetime(2024, 4, 20, 12, 0, tzinfo=timezone.utc)
        jobs = [
            JobSnapshot(job_id=f"job-open-{i}", title="Engineer", status="open", posted_at=posted)
            for i in range(open_jobs)
        ] + [
            JobSnapshot(job_id=f"job-closed-{i}", title="Engineer", status="closed", posted_at=posted)
            for i in range(closed_jobs)
        ]
        candidates = [
            CandidateSnapshot(candidate_id=f"cand-{i}", name=name)
            for i, name in enumerate(candidate_names)
        ]
        applications = [
            ApplicationSnapshot(
                application_id=f"app-{i}",
                job_id=jobs[0].job_id if jobs else "",
                candidate_id="cand-0",
                created_at=AS_OF - timedelta(days=1),
            )
            for i in range(recent_applications)
        ] + [
            ApplicationSnapshot(
                application_id=f"hire-{i}",
                job_id=jobs[0].job_id if jobs else "",
                candidate_id="cand-1",
                status="hired",
                created_at=datetime(2024, 5, 20, tzinfo=timezone.utc),
                updated_at=posted + timedelta(days=33),
            )
            for i in range(hires)
        ]
        return OrganizationSnapshot(
            organization_id=organization_id,
            candidates=candidates,
            jobs=jobs,
            applications=applications,
            as_of=AS_OF,
        )

    return _make
