# Agent modules - Core contracts
from .base import (
    BaseAgent,
    AgentResponse,
    AgentResult,
    AgentStatus,
    ScoringState,
)

# Scoring agents
from .matcher import MatchScoreAgent, MatchInput
from .bias_analyzer import BiasAnalyzerAgent, BiasInput
from .pipeline_health import (
    PipelineHealthAgent,
    HealthInput,
    HealthHistory,
    SnapshotProvider,
    calculate_pipeline_health,
    pipeline_metrics,
    update_thresholds,
    RECOMMENDATION_TRIGGER_FLOOR,
    ALERT_CRITICAL_FLOOR,
    TRIGGER_LOW_CANDIDATE_VOLUME,
    TRIGGER_LOW_APPLICATION_RATE,
    TRIGGER_HIGH_TIME_TO_FILL,
    TRIGGER_LOW_DIVERSITY_RATIO,
)
from .orchestrator import ScoringOrchestrator

__all__ = [
    # Core contracts
    "BaseAgent",
    "AgentResponse",
    "AgentResult",
    "AgentStatus",
    "ScoringState",
    # Agents
    "MatchScoreAgent",
    "MatchInput",
    "BiasAnalyzerAgent",
    "BiasInput",
    "PipelineHealthAgent",
    "HealthInput",
    "HealthHistory",
    "SnapshotProvider",
    "ScoringOrchestrator",
    # Operations
    "calculate_pipeline_health",
    "pipeline_metrics",
    "update_thresholds",
    "RECOMMENDATION_TRIGGER_FLOOR",
    "ALERT_CRITICAL_FLOOR",
    "TRIGGER_LOW_CANDIDATE_VOLUME",
    "TRIGGER_LOW_APPLICATION_RATE",
    "TRIGGER_HIGH_TIME_TO_FILL",
    "TRIGGER_LOW_DIVERSITY_RATIO",
]
