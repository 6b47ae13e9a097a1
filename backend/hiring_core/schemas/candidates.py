"""
Candidate-side schemas: profile snapshots, applications and match results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import uuid4

from .job import JobSnapshot

EducationInput = Union[str, List[Union[str, Dict[str, Any]]], Dict[str, Any], None]


@dataclass(frozen=True)
class CandidateSnapshot:
    """
    Read-only candidate profile data.

    Attributes:
        candidate_id: Identifier assigned by the persistence layer
        name: Display name; only used by the diversity ratio heuristic
        skills: Skill labels; malformed entries are tolerated and filtered
        years_experience: Total years of experience (0 = unknown)
        education: Free text, a list of strings, or degree records
            ({"degree", "field_of_study", "institution"})
        current_company: Current employer, if any
        status: Candidate status in the organization ("new", "active", ...)
        created_at: When the candidate entered the pipeline
    """
    candidate_id: str = field(default_factory=lambda: uuid4().hex)
    name: str = ""
    skills: List[Any] = field(default_factory=list)
    years_experience: float = 0
    education: EducationInput = None
    current_company: Optional[str] = None
    status: str = "new"
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "name": self.name,
            "skills": list(self.skills),
            "years_experience": self.years_experience,
            "education": self.education,
            "current_company": self.current_company,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CandidateSnapshot":
        """Build a snapshot from a loosely shaped record; unknown keys are ignored."""
        return cls(
            candidate_id=str(data.get("candidate_id") or data.get("id") or uuid4().hex),
            name=data.get("name") or "",
            skills=list(data.get("skills") or []),
            years_experience=data.get("years_experience") or data.get("experience") or 0,
            education=data.get("education"),
            current_company=data.get("current_company") or None,
            status=data.get("status") or "new",
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class ApplicationSnapshot:
    """
    A candidate's application to a job.

    For hired applications, updated_at is the hire timestamp.
    """
    application_id: str = field(default_factory=lambda: uuid4().hex)
    job_id: str = ""
    candidate_id: str = ""
    status: str = "applied"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_hired(self) -> bool:
        return self.status == "hired"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "application_id": self.application_id,
            "job_id": self.job_id,
            "candidate_id": self.candidate_id,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class MatchResult:
    """
    Outcome of scoring one candidate against one job.

    All scores are on a 0-100 scale. match_score is the weighted blend of
    the four components; the skill lists explain the technical component.
    """
    candidate_id: str
    job_id: str
    match_score: int
    technical_match: float
    experience_fit: float
    cultural_fit: float
    success_probability: float
    matching_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "job_id": self.job_id,
            "match_score": self.match_score,
            "technical_match": self.technical_match,
            "experience_fit": self.experience_fit,
            "cultural_fit": self.cultural_fit,
            "success_probability": self.success_probability,
            "matching_skills": list(self.matching_skills),
            "missing_skills": list(self.missing_skills),
        }


@dataclass
class JobRecommendation:
    """A job suggested to a candidate, with the reason shown to them."""
    job: JobSnapshot
    match: MatchResult
    reasons: List[str] = field(default_factory=list)

    @property
    def match_score(self) -> int:
        return self.match.match_score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job": self.job.to_dict(),
            "match_score": self.match.match_score,
            "match": self.match.to_dict(),
            "reasons": list(self.reasons),
        }
