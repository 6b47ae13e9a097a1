"""
Pipeline metric conversions.

Pure functions that turn raw recruiting counts into 0-100 sub-health
scores, combine them into one weighted health score, bucket the score
into a status, and validate threshold configurations. Nothing here holds
state or touches I/O.
"""

import math
from typing import Any, Dict, List, Mapping, Optional, Union

from . import tables

HEALTH_SCORE_MIN = 0
HEALTH_SCORE_MAX = 100
WEIGHT_TOTAL = 100

STATUS_HEALTHY = "healthy"
STATUS_WARNING = "warning"
STATUS_CRITICAL = "critical"


# =============================================================================
# HELPERS
# =============================================================================

def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3), unlike round()."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = HEALTH_SCORE_MIN, high: float = HEALTH_SCORE_MAX) -> float:
    return max(low, min(high, value))


def _weight(weights: Any, name: str) -> float:
    if isinstance(weights, Mapping):
        return float(weights.get(name, 0))
    return float(getattr(weights, name, 0))


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


# =============================================================================
# SUB-HEALTH SCORES
# =============================================================================

def candidate_volume_health(active_candidates: int, open_positions: int, target_candidates_per_job: float) -> int:
    """
    How well stocked the pipeline is relative to open positions.

    No open positions means there is nothing to fill, which is healthy.
    """
    if open_positions == 0 or target_candidates_per_job <= 0:
        return 100
    candidates_per_job = active_candidates / open_positions
    return round_half_up(clamp(candidates_per_job / target_candidates_per_job * 100))


def application_rate_health(weekly_applications: int, target_weekly_applications: float) -> int:
    """Applications received in the last week relative to the weekly target."""
    if target_weekly_applications <= 0:
        return 100
    return round_half_up(clamp(weekly_applications / target_weekly_applications * 100))


def time_to_fill_health(avg_days_to_fill: float, max_time_to_fill: float) -> int:
    """
    100 while the average time-to-fill stays within the limit, then a
    linear drop reaching 0 at twice the limit.
    """
    if avg_days_to_fill <= max_time_to_fill or max_time_to_fill <= 0:
        return 100
    health = 100 - (avg_days_to_fill - max_time_to_fill) / max_time_to_fill * 100
    return round_half_up(max(0.0, health))


def diversity_health(diverse_candidates: int, total_candidates: int, target_diversity_ratio: float) -> int:
    """Observed diversity ratio relative to the target ratio. No candidates scores 0."""
    if total_candidates == 0:
        return 0
    ratio = diverse_candidates / total_candidates
    if target_diversity_ratio <= 0:
        return 100
    return round_half_up(clamp(ratio / target_diversity_ratio * 100))


# =============================================================================
# AGGREGATION
# =============================================================================

def overall_health_score(sub_scores: Mapping[str, float], weights: Any) -> int:
    """
    Weighted sum of the four sub-scores.

    Weights are percent-of-100 (a HealthWeights model or a plain mapping
    keyed candidate_volume/application_rate/time_to_fill/diversity_ratio).
    The result is rounded but not clamped: bounded sub-scores and weights
    summing to 100 already keep it within 0-100.

    Example:
        >>> overall_health_score(
        ...     {"candidate_volume": 20, "application_rate": 90,
        ...      "time_to_fill": 90, "diversity_ratio": 90},
        ...     {"candidate_volume": 40, "application_rate": 30,
        ...      "time_to_fill": 20, "diversity_ratio": 10},
        ... )
        62
    """
    score = sum(
        float(sub_scores.get(name, 0)) * _weight(weights, name) / WEIGHT_TOTAL
        for name in ("candidate_volume", "application_rate", "time_to_fill", "diversity_ratio")
    )
    return round_half_up(score)


def status_from_score(score: float, thresholds: Optional[Any] = None) -> str:
    """
    Bucket a health score into healthy / warning / critical.

    Args:
        score: Overall health score
        thresholds: Anything with healthy_score_min and warning_score_min;
            the default cutoffs (80/60) are used when omitted
    """
    if thresholds is None:
        defaults = tables.health_defaults()
        healthy_min, warning_min = defaults["healthy_score_min"], defaults["warning_score_min"]
    else:
        healthy_min, warning_min = thresholds.healthy_score_min, thresholds.warning_score_min

    if score >= healthy_min:
        return STATUS_HEALTHY
    if score >= warning_min:
        return STATUS_WARNING
    return STATUS_CRITICAL


def health_status(score: float, thresholds: Optional[Any] = None) -> Dict[str, str]:
    """Status plus its display colour and label."""
    status = status_from_score(score, thresholds)
    return {"status": status, "color": health_color(status), "label": status_label(status)}


# =============================================================================
# VALIDATION
# =============================================================================

def validate_thresholds(thresholds: Any) -> List[str]:
    """
    Check the relational rules of a threshold configuration.

    Returns:
        Human-readable violations; an empty list means the configuration
        is acceptable.
    """
    violations: List[str] = []

    weights = thresholds.weights
    total = sum(
        _weight(weights, name)
        for name in ("candidate_volume", "application_rate", "time_to_fill", "diversity_ratio")
    )
    if not math.isclose(total, WEIGHT_TOTAL, abs_tol=1e-9):
        violations.append(
            f"Metric weights must sum to 100, currently sum to {_format_number(total)}"
        )

    if thresholds.warning_score_min >= thresholds.healthy_score_min:
        violations.append("Warning score minimum must be less than healthy score minimum")

    if thresholds.critical_diversity_ratio >= thresholds.min_diversity_ratio:
        violations.append("Critical diversity ratio must be less than minimum diversity ratio")

    return violations


def is_valid_health_score(score: float) -> bool:
    return HEALTH_SCORE_MIN <= score <= HEALTH_SCORE_MAX


def is_valid_percentage(value: float) -> bool:
    return 0 <= value <= 100


# =============================================================================
# SUMMARY RATIOS
# =============================================================================

def candidate_to_job_ratio(total_candidates: int, total_jobs: int) -> float:
    """Candidates per job, two decimals. No jobs gives 0."""
    if total_jobs == 0:
        return 0.0
    return round_half_up(total_candidates / total_jobs * 100) / 100


def conversion_rate(hired_count: int, total_applications: int) -> float:
    """Hired applications as a percentage of all applications, one decimal."""
    if total_applications == 0:
        return 0.0
    return round_half_up(hired_count / total_applications * 100 * 10) / 10


# =============================================================================
# DISPLAY
# =============================================================================

def health_color(status: str) -> str:
    colors = tables.health_display()["colors"]
    return colors.get(status.lower(), colors["neutral"])


def status_label(status: str) -> str:
    labels = tables.health_display()["status_labels"]
    return labels.get(status.lower(), labels["unknown"])


def format_health_score(score: float) -> str:
    return f"{round_half_up(score)}%"


def format_percentage(value: float) -> str:
    return f"{round_half_up(value)}%"


def format_ratio(value: Union[int, float]) -> str:
    return f"{value:.2f}:1"


def format_days(value: float) -> str:
    return f"{round_half_up(value)}d"
