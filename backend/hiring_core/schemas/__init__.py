# Data contracts shared by the scoring agents
from .job import JobSnapshot
from .candidates import CandidateSnapshot, ApplicationSnapshot, MatchResult, JobRecommendation
from .bias import BiasFinding, LanguagePattern, LanguageAnalysis, ComplianceReport, BiasAnalysisResult
from .health import (
    HealthWeights,
    HealthThresholds,
    HealthMetrics,
    QuickAction,
    Alert,
    HealthRecord,
    OrganizationSnapshot,
)

__all__ = [
    "JobSnapshot",
    "CandidateSnapshot",
    "ApplicationSnapshot",
    "MatchResult",
    "JobRecommendation",
    "BiasFinding",
    "LanguagePattern",
    "LanguageAnalysis",
    "ComplianceReport",
    "BiasAnalysisResult",
    "HealthWeights",
    "HealthThresholds",
    "HealthMetrics",
    "QuickAction",
    "Alert",
    "HealthRecord",
    "OrganizationSnapshot",
]
