"""
Base Agent Contracts for the hiring core.

Every scoring component (match scorer, bias analyzer, pipeline health
calculator) is an agent built on these abstractions, so callers get the
same envelope everywhere: a status, a typed output, a confidence score,
an explanation, and an immutable state snapshot recording what ran.

Design Principles:
    1. Single Responsibility: Each agent computes exactly one kind of score
    2. Strong Typing: Inputs/outputs are dataclasses, not raw dicts
    3. Immutability: ScoringState is frozen; updates return new instances
    4. Stateless Agents: All data arrives as parameters, nothing is global
    5. Explainability: Every result carries confidence and explanation

Usage:
    >>> class MyAgent(BaseAgent[MyInput, MyOutput]):
    ...     name = "my_agent"
    ...     description = "Scores something specific"
    ...
    ...     def run(self, input_data: MyInput, state: Optional[ScoringState] = None) -> AgentResult[MyOutput]:
    ...         ...
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import uuid4

logger = logging.getLogger(__name__)


# =============================================================================
# TYPE VARIABLES
# =============================================================================

InputT = TypeVar("InputT")   # Agent input type
OutputT = TypeVar("OutputT") # Agent output type


# =============================================================================
# ENUMS
# =============================================================================

class AgentStatus(str, Enum):
    """
    Outcome status of an agent's execution.

    Using str, Enum for JSON serialization compatibility.
    """
    SUCCESS = "success"   # Agent produced a score
    FAILURE = "failure"   # Agent could not produce a score


# =============================================================================
# CORE DATA CONTRACTS
# =============================================================================

@dataclass(frozen=True)
class AgentResponse(Generic[OutputT]):
    """
    Standardized response returned by every agent.

    Attributes:
        agent_name: Identifier of the agent that produced this response
        status: Execution outcome (success/failure)
        output: The actual result data, strongly typed per agent
        confidence_score: How complete the input data was [0.0, 1.0]
            - 1.0 = every input the heuristics use was present
            - lower = some components fell back to neutral values
        explanation: Human-readable reasoning for the output
        metadata: Optional diagnostics (reasoning trace, table versions)

    Example:
        >>> response = AgentResponse(
        ...     agent_name="bias_analyzer",
        ...     status=AgentStatus.SUCCESS,
        ...     output=analysis,
        ...     confidence_score=1.0,
        ...     explanation="Bias score 94 (Low Risk), 2 terms flagged"
        ... )
    """
    agent_name: str
    status: AgentStatus
    output: Optional[OutputT] = None
    confidence_score: float = 0.0
    explanation: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        if not 0.0 <= self.confidence_score <= 1.0:
            raise ValueError(
                f"confidence_score must be in [0.0, 1.0], got {self.confidence_score}"
            )

    def is_successful(self) -> bool:
        """Check if the agent completed successfully."""
        return self.status == AgentStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dictionary."""
        return {
            "agent_name": self.agent_name,
            "status": self.status.value,
            "output": self.output if not hasattr(self.output, "to_dict")
                      else self.output.to_dict(),  # type: ignore
            "confidence_score": self.confidence_score,
            "explanation": self.explanation,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class ScoringState:
    """
    Immutable record of one scoring session.

    A session can be a single match, a batch ranking for a job, or a health
    calculation for an organization. Each agent receives the current state
    and returns a NEW state with its output appended, so a session's
    history can be inspected after the fact without any shared mutable
    object between concurrent calls.

    Attributes:
        session_id: Unique identifier for this scoring session
        organization_id: Organization the session runs for, if any
        subject_ids: Candidate/job identifiers involved
        created_at: When the session started
        agent_outputs: Serialized outputs keyed by agent name
        decision_log: Audit trail of scores and their reasoning
        errors: Errors encountered (non-fatal to the caller)
        metadata: Additional context
    """
    organization_id: Optional[str] = None
    subject_ids: tuple[str, ...] = field(default_factory=tuple)
    session_id: str = field(default_factory=lambda: uuid4().hex)
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    agent_outputs: Dict[str, Any] = field(default_factory=dict)
    decision_log: tuple[Dict[str, Any], ...] = field(default_factory=tuple)
    errors: tuple[str, ...] = field(default_factory=tuple)
    metadata: Dict[str, Any] = field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Immutable Update Methods
    # -------------------------------------------------------------------------

    def with_agent_output(self, agent_name: str, output: Any) -> "ScoringState":
        """Return a new state with an agent's output recorded."""
        return replace(self, agent_outputs={**self.agent_outputs, agent_name: output})

    def with_decision(
        self,
        decision_type: str,
        decision: str,
        reasoning: str,
        confidence: float,
        agent_name: str,
    ) -> "ScoringState":
        """
        Return a new state with a decision logged for audit purposes.

        Args:
            decision_type: Category of decision (e.g., "match_score", "health_status")
            decision: The actual outcome
            reasoning: Why this outcome was reached
            confidence: Confidence in the outcome [0.0, 1.0]
            agent_name: Which agent produced it
        """
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "agent": agent_name,
            "type": decision_type,
            "decision": decision,
            "reasoning": reasoning,
            "confidence": confidence,
        }
        return replace(self, decision_log=self.decision_log + (entry,))

    def with_error(self, error: str) -> "ScoringState":
        """Return a new state with an error recorded."""
        return replace(self, errors=self.errors + (error,))

    def with_subjects(self, subject_ids: List[str]) -> "ScoringState":
        """Return a new state with updated subject list."""
        return replace(self, subject_ids=tuple(subject_ids))

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    def get_agent_output(self, agent_name: str) -> Optional[Any]:
        """Retrieve a specific agent's output, or None if not present."""
        return self.agent_outputs.get(agent_name)

    def has_agent_run(self, agent_name: str) -> bool:
        return agent_name in self.agent_outputs

    def get_decisions_by_type(self, decision_type: str) -> List[Dict[str, Any]]:
        """Filter decision log by decision type."""
        return [d for d in self.decision_log if d.get("type") == decision_type]

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize state to JSON-compatible dictionary."""
        return {
            "session_id": self.session_id,
            "organization_id": self.organization_id,
            "subject_ids": list(self.subject_ids),
            "created_at": self.created_at,
            "agent_outputs": self.agent_outputs,
            "decision_log": list(self.decision_log),
            "errors": list(self.errors),
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class AgentResult(Generic[OutputT]):
    """
    Combined result of an agent execution: response + updated state.

    Example:
        >>> result = agent.run(input_data)
        >>> if result.response.is_successful():
        ...     score = result.response.output
    """
    response: AgentResponse[OutputT]
    state: ScoringState


# =============================================================================
# BASE AGENT ABSTRACT CLASS
# =============================================================================

class BaseAgent(ABC, Generic[InputT, OutputT]):
    """
    Abstract base class for all scoring agents.

    Class Attributes:
        name: Unique identifier for this agent type (must be overridden)
        description: Human-readable description of agent's responsibility

    Design Contract:
        1. Agents are stateless - reference tables are read-only, all
           per-call data flows through parameters and ScoringState
        2. Agents are deterministic - same input always produces same output
        3. Agents never raise from run() - failures become FAILURE responses
    """

    name: str = "base_agent"
    description: str = "Base agent - must be overridden"

    def __init__(self, agent_id: Optional[str] = None):
        """
        Args:
            agent_id: Unique identifier for this agent instance.
                     If not provided, generates a UUID.
        """
        self.agent_id = agent_id or uuid4().hex[:12]

    def log_reasoning(self, trace: Optional[List[str]], message: str) -> None:
        """
        Add a step to a call's reasoning trace and to the debug log.

        The trace is a per-call list owned by the caller, so concurrent
        runs on one agent instance never share it.
        """
        if trace is not None:
            trace.append(message)
        logger.debug("[%s] %s", self.name, message)

    @abstractmethod
    def run(
        self,
        input_data: InputT,
        state: Optional[ScoringState] = None
    ) -> AgentResult[OutputT]:
        """
        Execute the agent's core logic.

        Args:
            input_data: Strongly-typed input specific to this agent
            state: Current scoring state; a fresh one is created when omitted

        Returns:
            AgentResult containing the response and the updated state

        Raises:
            Should NOT raise exceptions. Errors are captured in
            AgentResponse with status=FAILURE.
        """

    # -------------------------------------------------------------------------
    # Helper Methods (for subclasses)
    # -------------------------------------------------------------------------

    def _success(
        self,
        output: OutputT,
        state: ScoringState,
        confidence: float,
        explanation: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AgentResult[OutputT]:
        """Construct a successful result and record the output in state."""
        response = AgentResponse(
            agent_name=self.name,
            status=AgentStatus.SUCCESS,
            output=output,
            confidence_score=confidence,
            explanation=explanation,
            metadata=metadata or {},
        )

        output_dict = output.to_dict() if hasattr(output, "to_dict") else output
        new_state = state.with_agent_output(self.name, output_dict)

        return AgentResult(response=response, state=new_state)

    def _failure(
        self,
        state: ScoringState,
        error: str,
        explanation: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AgentResult[OutputT]:
        """Construct a failure result and record the error in state."""
        logger.warning("[%s] %s", self.name, error)
        response: AgentResponse[OutputT] = AgentResponse(
            agent_name=self.name,
            status=AgentStatus.FAILURE,
            output=None,
            confidence_score=0.0,
            explanation=explanation,
            metadata={**(metadata or {}), "error": error},
        )
        new_state = state.with_error(f"[{self.name}] {error}")

        return AgentResult(response=response, state=new_state)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
