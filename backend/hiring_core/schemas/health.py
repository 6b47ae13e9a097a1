"""
Pipeline health schemas.

HealthThresholds is the per-organization configuration and is a pydantic
model so that field bounds are enforced on construction; the cross-field
rules (weights summing to 100, ordered cutoffs) are reported by
validate_configuration() as a list of violations instead of raising.
HealthRecord and friends are plain dataclasses produced by the calculator.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core import tables
from .candidates import ApplicationSnapshot, CandidateSnapshot
from .job import JobSnapshot

SEVERITY_CRITICAL = "critical"
SEVERITY_WARNING = "warning"


# =============================================================================
# CONFIGURATION (pydantic)
# =============================================================================

class HealthWeights(BaseModel):
    """Percent-of-100 weight of each sub-metric in the overall health score."""
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    candidate_volume: float = Field(default=40, ge=0, le=100)
    application_rate: float = Field(default=30, ge=0, le=100)
    time_to_fill: float = Field(default=20, ge=0, le=100)
    diversity_ratio: float = Field(default=10, ge=0, le=100)


class HealthThresholds(BaseModel):
    """
    Per-organization health targets, score cutoffs and weights.

    Field bounds (e.g. min_candidates_per_job >= 1) are enforced by
    pydantic. The relational rules are checked by validate_configuration().

    Example:
        >>> thresholds = HealthThresholds.defaults("org_42")
        >>> thresholds.validate_configuration()
        []
    """
    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    organization_id: Optional[str] = None

    min_candidates_per_job: float = Field(default=10, ge=1)
    critical_candidates_per_job: float = Field(default=5, ge=1)

    min_weekly_applications: float = Field(default=20, ge=1)
    critical_weekly_applications: float = Field(default=10, ge=1)

    max_time_to_fill: float = Field(default=30, ge=1)
    critical_time_to_fill: float = Field(default=60, ge=1)

    min_diversity_ratio: float = Field(default=0.2, ge=0, le=1)
    critical_diversity_ratio: float = Field(default=0.1, ge=0, le=1)

    healthy_score_min: float = Field(default=80, ge=0, le=100)
    warning_score_min: float = Field(default=60, ge=0, le=100)

    weights: HealthWeights = Field(default_factory=HealthWeights)

    alert_enabled: bool = True
    email_alerts: bool = True
    in_app_alerts: bool = True
    alert_frequency: Literal["immediate", "hourly", "daily", "weekly"] = "immediate"

    is_active: bool = True

    @classmethod
    def defaults(cls, organization_id: Optional[str] = None) -> "HealthThresholds":
        """Thresholds built from the health_defaults reference table."""
        return cls(organization_id=organization_id, **tables.health_defaults())

    def validate_configuration(self) -> List[str]:
        """Return every relational rule this configuration violates (empty = valid)."""
        from ..core.metrics import validate_thresholds
        return validate_thresholds(self)


# =============================================================================
# CALCULATION OUTPUT (dataclasses)
# =============================================================================

@dataclass
class HealthMetrics:
    """The four sub-health scores plus the raw counts they came from."""
    candidate_volume_health: int = 0
    application_rate_health: int = 0
    time_to_fill_health: int = 0
    diversity_health: int = 0
    active_candidates: int = 0
    weekly_applications: int = 0
    avg_time_to_fill: int = 0
    open_positions: int = 0
    candidate_to_job_ratio: float = 0.0
    diversity_ratio: float = 0.0

    def sub_scores(self) -> Dict[str, int]:
        """Sub-scores keyed by weight name."""
        return {
            "candidate_volume": self.candidate_volume_health,
            "application_rate": self.application_rate_health,
            "time_to_fill": self.time_to_fill_health,
            "diversity_ratio": self.diversity_health,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate_volume_health": self.candidate_volume_health,
            "application_rate_health": self.application_rate_health,
            "time_to_fill_health": self.time_to_fill_health,
            "diversity_health": self.diversity_health,
            "active_candidates": self.active_candidates,
            "weekly_applications": self.weekly_applications,
            "avg_time_to_fill": self.avg_time_to_fill,
            "open_positions": self.open_positions,
            "candidate_to_job_ratio": self.candidate_to_job_ratio,
            "diversity_ratio": self.diversity_ratio,
        }


@dataclass(frozen=True)
class QuickAction:
    label: str
    action: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "action": self.action}


@dataclass
class Alert:
    """
    A structured alert for one failing sub-metric.

    acknowledged/resolved are carried for the notification layer; the
    core always emits them as False.
    """
    type: str
    severity: str
    title: str
    message: str
    recommendations: List[str] = field(default_factory=list)
    quick_actions: List[QuickAction] = field(default_factory=list)
    acknowledged: bool = False
    resolved: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "recommendations": list(self.recommendations),
            "quick_actions": [a.to_dict() for a in self.quick_actions],
            "acknowledged": self.acknowledged,
            "resolved": self.resolved,
        }


@dataclass(frozen=True)
class HealthRecord:
    """
    One pipeline health calculation. Records are append-only history.
    """
    timestamp: datetime
    health_score: int
    status: str
    metrics: HealthMetrics
    triggers: List[str] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    calculated_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "health_score": self.health_score,
            "status": self.status,
            "metrics": self.metrics.to_dict(),
            "triggers": list(self.triggers),
            "alerts": [a.to_dict() for a in self.alerts],
            "recommendations": list(self.recommendations),
            "calculated_by": self.calculated_by,
        }

    def to_trend_point(self) -> Dict[str, Any]:
        """The subset of fields used by trend charts."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "health_score": self.health_score,
            "status": self.status,
            "metrics": self.metrics.to_dict(),
        }


# =============================================================================
# INPUT SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class OrganizationSnapshot:
    """
    Everything the health calculator needs for one organization.

    A collection set to None means the persistence layer could not supply
    it; an empty list means there genuinely is nothing.
    """
    organization_id: str
    candidates: Optional[List[CandidateSnapshot]] = field(default_factory=list)
    jobs: Optional[List[JobSnapshot]] = field(default_factory=list)
    applications: Optional[List[ApplicationSnapshot]] = field(default_factory=list)
    as_of: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
