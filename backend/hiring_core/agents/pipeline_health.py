"""
Pipeline Health Agent

Responsibility: Turn an organization's candidate/job/application snapshot
into one health record.
Single purpose: Compute sub-health scores, the weighted health score and
status, then derive triggers, recommendations and alerts.

This agent does NOT persist records or deliver alerts - callers do that.
Retrieval is the only async step; see calculate_pipeline_health().

Two floors are used on each sub-score:
    RECOMMENDATION_TRIGGER_FLOOR (60): below it a named trigger fires and
        its advisory recommendations are added.
    ALERT_CRITICAL_FLOOR (30): below it a critical alert is built. Metrics
        that have a warning alert template get one between 30 and 60.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

from pydantic import ValidationError

from .base import AgentResult, BaseAgent, ScoringState
from ..core import metrics as health_metrics
from ..core import tables
from ..core.exceptions import DataUnavailableError, InvalidConfigurationError
from ..schemas.candidates import ApplicationSnapshot, CandidateSnapshot
from ..schemas.health import (
    SEVERITY_CRITICAL,
    SEVERITY_WARNING,
    Alert,
    HealthMetrics,
    HealthRecord,
    HealthThresholds,
    OrganizationSnapshot,
    QuickAction,
)
from ..schemas.job import JobSnapshot

logger = logging.getLogger(__name__)

RECOMMENDATION_TRIGGER_FLOOR = 60
ALERT_CRITICAL_FLOOR = 30
RECENT_APPLICATION_DAYS = 7

TRIGGER_LOW_CANDIDATE_VOLUME = "LOW_CANDIDATE_VOLUME"
TRIGGER_LOW_APPLICATION_RATE = "LOW_APPLICATION_RATE"
TRIGGER_HIGH_TIME_TO_FILL = "HIGH_TIME_TO_FILL"
TRIGGER_LOW_DIVERSITY_RATIO = "LOW_DIVERSITY_RATIO"

# Threshold fields an update may never change
PROTECTED_THRESHOLD_FIELDS = frozenset({"organization_id"})


@dataclass
class HealthInput:
    """Input for the pipeline health agent."""
    snapshot: OrganizationSnapshot
    thresholds: Optional[HealthThresholds] = None


# =============================================================================
# RAW COUNTS
# =============================================================================

def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def recent_applications(
    applications: Sequence[ApplicationSnapshot],
    as_of: datetime,
    days: int = RECENT_APPLICATION_DAYS,
) -> List[ApplicationSnapshot]:
    """Applications created within the trailing window ending at as_of."""
    start = _as_utc(as_of) - timedelta(days=days)
    return [
        app for app in applications
        if app.created_at is not None and _as_utc(app.created_at) >= start
    ]


def average_time_to_fill(jobs: Sequence[JobSnapshot], applications: Sequence[ApplicationSnapshot]) -> float:
    """
    Mean days from posting to hire across hired applications (0 if none).

    Each hire counts ceil(days) between the job's posted_at and the
    application's updated_at. A hire whose job (or either timestamp) is
    unknown adds no days but still counts toward the average.
    """
    hires = [app for app in applications if app.is_hired]
    if not hires:
        return 0.0

    posted = {job.job_id: job.posted_at for job in jobs}
    total_days = 0
    for app in hires:
        posted_at = posted.get(app.job_id)
        if posted_at is None or app.updated_at is None:
            continue
        elapsed = _as_utc(app.updated_at) - _as_utc(posted_at)
        total_days += math.ceil(elapsed / timedelta(days=1))

    return total_days / len(hires)


def diverse_candidate_count(candidates: Sequence[CandidateSnapshot], fragments: Optional[Sequence[str]] = None) -> int:
    """
    Candidates whose name contains one of the indicator fragments.

    This is a coarse surname heuristic, not a demographic measurement.
    """
    if fragments is None:
        fragments = tables.diversity_name_fragments()
    return sum(
        1 for candidate in candidates
        if any(fragment in (candidate.name or "").lower() for fragment in fragments)
    )


def diversity_ratio(candidates: Sequence[CandidateSnapshot], fragments: Optional[Sequence[str]] = None) -> float:
    """Share of candidates flagged by diverse_candidate_count (0 when empty)."""
    if not candidates:
        return 0.0
    return diverse_candidate_count(candidates, fragments) / len(candidates)


def _require_collections(
    snapshot: OrganizationSnapshot,
) -> Tuple[List[CandidateSnapshot], List[JobSnapshot], List[ApplicationSnapshot]]:
    missing = [
        name for name in ("candidates", "jobs", "applications")
        if getattr(snapshot, name) is None
    ]
    if missing:
        raise DataUnavailableError(
            f"Snapshot for organization {snapshot.organization_id} is missing: {', '.join(missing)}",
            organization_id=snapshot.organization_id,
        )
    return list(snapshot.candidates), list(snapshot.jobs), list(snapshot.applications)


def pipeline_metrics(snapshot: OrganizationSnapshot) -> Dict[str, Any]:
    """
    Headline pipeline totals for dashboards.

    Raises:
        DataUnavailableError: If any collection in the snapshot is missing
    """
    candidates, jobs, applications = _require_collections(snapshot)
    hired = sum(1 for app in applications if app.is_hired)
    return {
        "total_candidates": len(candidates),
        "total_jobs": len(jobs),
        "open_jobs": sum(1 for job in jobs if job.is_open),
        "total_applications": len(applications),
        "hired_count": hired,
        "candidate_to_job_ratio": health_metrics.candidate_to_job_ratio(len(candidates), len(jobs)),
        "conversion_rate": health_metrics.conversion_rate(hired, len(applications)),
    }


# =============================================================================
# THRESHOLD UPDATES
# =============================================================================

def _describe_validation_error(error: ValidationError) -> List[str]:
    violations = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        violations.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return violations


def update_thresholds(current: HealthThresholds, updates: Mapping[str, Any]) -> HealthThresholds:
    """
    Apply a partial update to a threshold set and revalidate it.

    Unknown keys are ignored. A partial "weights" mapping is merged onto
    the current weights. The current object is never modified.

    Raises:
        InvalidConfigurationError: With every violated bound or rule; the
            update is rejected as a whole.
    """
    data = current.model_dump()
    for key, value in updates.items():
        if key not in HealthThresholds.model_fields or key in PROTECTED_THRESHOLD_FIELDS:
            logger.debug("Ignoring threshold update key %r", key)
            continue
        if key == "weights" and isinstance(value, Mapping):
            data["weights"] = {**data["weights"], **value}
        else:
            data[key] = value

    try:
        updated = HealthThresholds(**data)
    except ValidationError as e:
        raise InvalidConfigurationError(_describe_validation_error(e)) from e

    violations = updated.validate_configuration()
    if violations:
        raise InvalidConfigurationError(violations)

    logger.info("Thresholds updated for organization %s", updated.organization_id)
    return updated


# =============================================================================
# AGENT
# =============================================================================

class PipelineHealthAgent(BaseAgent[HealthInput, HealthRecord]):
    """
    Computes pipeline health for one organization snapshot.

    Input: HealthInput (OrganizationSnapshot + optional HealthThresholds)
    Output: HealthRecord

    Missing thresholds fall back to the documented defaults. A snapshot
    with a missing collection is a DataUnavailableError from calculate();
    through run() it becomes a FAILURE response and no record.
    """

    name = "pipeline_health"
    description = (
        "Aggregates candidate volume, application rate, time-to-fill and "
        "diversity into a weighted health score with triggers and alerts."
    )

    def __init__(
        self,
        agent_id: Optional[str] = None,
        trigger_rules: Optional[Mapping[str, Mapping[str, Any]]] = None,
        alert_templates: Optional[Mapping[str, Mapping[str, Any]]] = None,
        name_fragments: Optional[Sequence[str]] = None,
    ):
        super().__init__(agent_id)
        self.trigger_rules = trigger_rules if trigger_rules is not None else tables.trigger_rules()
        self.alert_templates = alert_templates if alert_templates is not None else tables.alert_templates()
        self.name_fragments = list(name_fragments) if name_fragments is not None else tables.diversity_name_fragments()

    # -------------------------------------------------------------------------
    # Agent contract
    # -------------------------------------------------------------------------

    def run(
        self,
        input_data: HealthInput,
        state: Optional[ScoringState] = None
    ) -> AgentResult[HealthRecord]:
        """
        Execute the health calculation and return result.

        Args:
            input_data: HealthInput with the snapshot and optional thresholds
            state: Optional scoring state

        Returns:
            AgentResult with HealthRecord and updated state
        """
        snapshot = input_data.snapshot
        if state is None:
            state = ScoringState(organization_id=snapshot.organization_id)

        trace: List[str] = []
        try:
            record = self.calculate(snapshot, input_data.thresholds, trace=trace)
        except DataUnavailableError as e:
            return self._failure(
                state=state,
                error=str(e),
                explanation="Pipeline health not calculated: snapshot data unavailable",
            )
        except InvalidConfigurationError as e:
            return self._failure(
                state=state,
                error=str(e),
                explanation="Pipeline health not calculated: invalid threshold configuration",
                metadata={"violations": e.violations},
            )
        except Exception as e:
            logger.exception("Pipeline health calculation failed for %s", snapshot.organization_id)
            return self._failure(
                state=state,
                error=str(e),
                explanation=f"Pipeline health calculation failed: {e}",
            )

        explanation = (
            f"Health score {record.health_score} ({record.status}); "
            f"{len(record.triggers)} triggers, {len(record.alerts)} alerts."
        )
        result = self._success(
            output=record,
            state=state,
            confidence=self._calculate_confidence(snapshot),
            explanation=explanation,
            metadata={"reasoning": trace},
        )
        new_state = result.state.with_decision(
            decision_type="health_status",
            decision=record.status,
            reasoning=explanation,
            confidence=result.response.confidence_score,
            agent_name=self.name,
        )
        return AgentResult(response=result.response, state=new_state)

    # -------------------------------------------------------------------------
    # Calculation API
    # -------------------------------------------------------------------------

    def calculate(
        self,
        snapshot: OrganizationSnapshot,
        thresholds: Optional[HealthThresholds] = None,
        trace: Optional[List[str]] = None,
    ) -> HealthRecord:
        """
        Build a health record from a snapshot.

        Raises:
            DataUnavailableError: If the snapshot is missing a collection
            InvalidConfigurationError: If the thresholds break a relational
                rule (e.g. weights not summing to 100)
        """
        if thresholds is None:
            thresholds = HealthThresholds.defaults(snapshot.organization_id)
            self.log_reasoning(trace, "Using default thresholds")

        violations = thresholds.validate_configuration()
        if violations:
            raise InvalidConfigurationError(violations)

        metrics = self.compute_metrics(snapshot, thresholds)
        self.log_reasoning(trace, f"Sub-scores: {metrics.sub_scores()}")

        health_score = health_metrics.overall_health_score(metrics.sub_scores(), thresholds.weights)
        status = health_metrics.status_from_score(health_score, thresholds)
        self.log_reasoning(trace, f"Health score {health_score} -> {status}")

        triggers = self.identify_triggers(metrics)
        recommendations = self.generate_recommendations(triggers)
        alerts = self.generate_alerts(metrics, thresholds)
        if triggers:
            self.log_reasoning(trace, f"Triggers: {', '.join(triggers)}")

        logger.info(
            "Pipeline health for %s: %d (%s), %d alerts",
            snapshot.organization_id, health_score, status, len(alerts),
        )
        return HealthRecord(
            timestamp=_as_utc(snapshot.as_of),
            health_score=health_score,
            status=status,
            metrics=metrics,
            triggers=triggers,
            alerts=alerts,
            recommendations=recommendations,
            calculated_by=snapshot.organization_id,
        )

    def compute_metrics(self, snapshot: OrganizationSnapshot, thresholds: HealthThresholds) -> HealthMetrics:
        """Raw counts and the four sub-health scores."""
        candidates, jobs, applications = _require_collections(snapshot)

        open_positions = sum(1 for job in jobs if job.is_open)
        weekly = len(recent_applications(applications, snapshot.as_of))
        avg_days = average_time_to_fill(jobs, applications)
        diverse = diverse_candidate_count(candidates, self.name_fragments)

        return HealthMetrics(
            candidate_volume_health=health_metrics.candidate_volume_health(
                len(candidates), open_positions, thresholds.min_candidates_per_job
            ),
            application_rate_health=health_metrics.application_rate_health(
                weekly, thresholds.min_weekly_applications
            ),
            time_to_fill_health=health_metrics.time_to_fill_health(avg_days, thresholds.max_time_to_fill),
            diversity_health=health_metrics.diversity_health(
                diverse, len(candidates), thresholds.min_diversity_ratio
            ),
            active_candidates=len(candidates),
            weekly_applications=weekly,
            avg_time_to_fill=health_metrics.round_half_up(avg_days),
            open_positions=open_positions,
            candidate_to_job_ratio=health_metrics.candidate_to_job_ratio(len(candidates), len(jobs)),
            diversity_ratio=diverse / len(candidates) if candidates else 0.0,
        )

    def identify_triggers(self, metrics: HealthMetrics) -> List[str]:
        """Names of every trigger whose sub-score is below the recommendation floor."""
        return [
            trigger for trigger, rule in self.trigger_rules.items()
            if getattr(metrics, rule["metric"]) < RECOMMENDATION_TRIGGER_FLOOR
        ]

    def generate_recommendations(self, triggers: Sequence[str]) -> List[str]:
        """Deduplicated union of each trigger's actions, in trigger order."""
        recommendations: List[str] = []
        for trigger in triggers:
            rule = self.trigger_rules.get(trigger)
            if rule is None:
                logger.warning("No recommendations defined for trigger %s", trigger)
                continue
            recommendations.extend(rule["recommendations"])
        return list(dict.fromkeys(recommendations))

    def generate_alerts(self, metrics: HealthMetrics, thresholds: Optional[HealthThresholds] = None) -> List[Alert]:
        """
        Structured alerts for failing sub-scores.

        No alerts are produced when the organization has alerts disabled.
        """
        if thresholds is not None and not thresholds.alert_enabled:
            return []

        alerts: List[Alert] = []
        for trigger, rule in self.trigger_rules.items():
            value = getattr(metrics, rule["metric"])
            templates = self.alert_templates.get(trigger, {})
            if value < ALERT_CRITICAL_FLOOR:
                severity = SEVERITY_CRITICAL
            elif value < RECOMMENDATION_TRIGGER_FLOOR:
                severity = SEVERITY_WARNING
            else:
                continue

            template = templates.get(severity)
            if template is None:
                continue
            alerts.append(Alert(
                type=trigger,
                severity=severity,
                title=template["title"],
                message=template["message"],
                recommendations=list(template["recommendations"]),
                quick_actions=[
                    QuickAction(label=qa["label"], action=qa["action"])
                    for qa in template.get("quick_actions", ())
                ],
            ))
        return alerts

    def _calculate_confidence(self, snapshot: OrganizationSnapshot) -> float:
        """Lower when the snapshot is thin enough that defaults dominate."""
        present = sum(1 for items in (snapshot.candidates, snapshot.jobs, snapshot.applications) if items)
        return (2 + present) / 5


# =============================================================================
# ASYNC RETRIEVAL BOUNDARY
# =============================================================================

class SnapshotProvider(Protocol):
    """Persistence-side source of snapshots and stored thresholds."""

    async def fetch_snapshot(self, organization_id: str) -> Optional[OrganizationSnapshot]:
        ...

    async def fetch_thresholds(self, organization_id: str) -> Optional[HealthThresholds]:
        ...


async def calculate_pipeline_health(
    organization_id: str,
    source: Union[OrganizationSnapshot, SnapshotProvider],
    thresholds: Optional[HealthThresholds] = None,
    agent: Optional[PipelineHealthAgent] = None,
) -> HealthRecord:
    """
    Fetch (if needed) and calculate pipeline health for an organization.

    Args:
        organization_id: Organization to calculate for
        source: An in-hand snapshot, or a provider to fetch one from
        thresholds: Overrides the stored thresholds when given
        agent: Calculator to use; a default one is built otherwise

    Raises:
        DataUnavailableError: If the snapshot or thresholds cannot be
            retrieved, or the snapshot is incomplete
        ValueError: If the snapshot belongs to a different organization
        InvalidConfigurationError: If the thresholds fail validation
    """
    agent = agent or PipelineHealthAgent()

    if isinstance(source, OrganizationSnapshot):
        snapshot = source
    else:
        try:
            if thresholds is None:
                snapshot, thresholds = await asyncio.gather(
                    source.fetch_snapshot(organization_id),
                    source.fetch_thresholds(organization_id),
                )
            else:
                snapshot = await source.fetch_snapshot(organization_id)
        except DataUnavailableError:
            raise
        except Exception as e:
            logger.error("Snapshot retrieval failed for %s: %s", organization_id, e)
            raise DataUnavailableError(
                f"Could not retrieve pipeline data for organization {organization_id}",
                organization_id=organization_id,
                original_exception=e,
            ) from e

    if snapshot is None:
        raise DataUnavailableError(
            f"No pipeline snapshot available for organization {organization_id}",
            organization_id=organization_id,
        )

    if snapshot.organization_id != organization_id:
        raise ValueError(
            f"Snapshot belongs to organization {snapshot.organization_id}, not {organization_id}"
        )

    if thresholds is None or not thresholds.is_active:
        thresholds = HealthThresholds.defaults(organization_id)

    return agent.calculate(snapshot, thresholds)


# =============================================================================
# HISTORY
# =============================================================================

class HealthHistory:
    """
    Append-only sequence of health records for one organization.

    Records are never replaced; trend queries read them back in time order.
    """

    def __init__(self, organization_id: Optional[str] = None, records: Optional[Sequence[HealthRecord]] = None):
        self.organization_id = organization_id
        self._records: List[HealthRecord] = []
        for record in records or ():
            self.append(record)

    def append(self, record: HealthRecord) -> HealthRecord:
        if self.organization_id is not None and record.calculated_by not in (None, self.organization_id):
            raise ValueError(
                f"Record for {record.calculated_by} cannot join history of {self.organization_id}"
            )
        self._records.append(record)
        return record

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HealthRecord]:
        return iter(sorted(self._records, key=lambda r: _as_utc(r.timestamp)))

    def latest(self) -> Optional[HealthRecord]:
        if not self._records:
            return None
        return max(self._records, key=lambda r: _as_utc(r.timestamp))

    def trends(self, days: int = 30, now: Optional[datetime] = None) -> List[HealthRecord]:
        """Records from the last `days` days, oldest first."""
        now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        start = now - timedelta(days=days)
        return [record for record in self if _as_utc(record.timestamp) >= start]

    def record_for_day(self, day: date) -> Optional[HealthRecord]:
        """The latest record calculated on the given (UTC) day, if any."""
        same_day = [record for record in self if _as_utc(record.timestamp).date() == day]
        return same_day[-1] if same_day else None
