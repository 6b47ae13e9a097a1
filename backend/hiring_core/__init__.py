"""
Hiring core: candidate-job match scoring, job posting bias analysis and
recruiting pipeline health.

    >>> from hiring_core import score_candidate_against_job, analyze_text
    >>> result = score_candidate_against_job(candidate, job)
    >>> report = analyze_text(job.description)
"""

from typing import Optional

from .agents import (
    BiasAnalyzerAgent,
    MatchScoreAgent,
    PipelineHealthAgent,
    ScoringOrchestrator,
    calculate_pipeline_health,
    update_thresholds,
)
from .core.exceptions import DataUnavailableError, HiringCoreError, InvalidConfigurationError
from .core.logging_config import setup_logging
from .schemas import (
    BiasAnalysisResult,
    CandidateSnapshot,
    HealthRecord,
    HealthThresholds,
    JobSnapshot,
    MatchResult,
    OrganizationSnapshot,
)

__version__ = "1.0.0"


def score_candidate_against_job(candidate: CandidateSnapshot, job: JobSnapshot) -> MatchResult:
    """Match result for one candidate against one job."""
    return MatchScoreAgent().score(candidate, job)


def analyze_text(text: Optional[str]) -> BiasAnalysisResult:
    """Bias report for a piece of text; None or empty text scores 100."""
    return BiasAnalyzerAgent().analyze(text)


__all__ = [
    "score_candidate_against_job",
    "analyze_text",
    "calculate_pipeline_health",
    "update_thresholds",
    "setup_logging",
    "MatchScoreAgent",
    "BiasAnalyzerAgent",
    "PipelineHealthAgent",
    "ScoringOrchestrator",
    "CandidateSnapshot",
    "JobSnapshot",
    "OrganizationSnapshot",
    "HealthThresholds",
    "MatchResult",
    "BiasAnalysisResult",
    "HealthRecord",
    "HiringCoreError",
    "InvalidConfigurationError",
    "DataUnavailableError",
]
