"""
Job schemas for the scoring engines.

A JobSnapshot is a read-only view of a job posting handed in by the
persistence layer. Nothing in the core mutates it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4


@dataclass(frozen=True)
class JobSnapshot:
    """
    Read-only job posting data.

    Attributes:
        job_id: Identifier assigned by the persistence layer
        title: Posting title; drives the job level used by cultural fit
        required_skills: Skill labels the role requires
        nice_to_have_skills: Skill labels that are a bonus
        experience_required: Years of experience asked for (0 = unspecified)
        status: Posting status ("open", "closed", "draft", ...)
        posted_at: When the posting went live; start of time-to-fill
        description: Free-text body, used for bias analysis
    """
    job_id: str = field(default_factory=lambda: uuid4().hex)
    title: str = ""
    required_skills: List[str] = field(default_factory=list)
    nice_to_have_skills: List[str] = field(default_factory=list)
    experience_required: float = 0
    status: str = "open"
    posted_at: Optional[datetime] = None
    description: str = ""

    @property
    def is_open(self) -> bool:
        return self.status == "open"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "title": self.title,
            "required_skills": list(self.required_skills),
            "nice_to_have_skills": list(self.nice_to_have_skills),
            "experience_required": self.experience_required,
            "status": self.status,
            "posted_at": self.posted_at.isoformat() if self.posted_at else None,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobSnapshot":
        """Build a snapshot from a loosely shaped record; unknown keys are ignored."""
        return cls(
            job_id=str(data.get("job_id") or data.get("id") or uuid4().hex),
            title=data.get("title") or "",
            required_skills=list(data.get("required_skills") or []),
            nice_to_have_skills=list(data.get("nice_to_have_skills") or []),
            experience_required=data.get("experience_required") or 0,
            status=data.get("status") or "open",
            posted_at=data.get("posted_at"),
            description=data.get("description") or "",
        )
