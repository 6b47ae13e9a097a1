"""
Exception hierarchy for the hiring core.

Scoring never raises on partial input; only two conditions are surfaced
to callers as exceptions:

    - InvalidConfigurationError: a threshold update failed validation
    - DataUnavailableError: a health calculation could not obtain its snapshot

TableLoadError covers broken reference data shipped with a deployment.
"""

from typing import List, Optional


class HiringCoreError(Exception):
    """Base class for all hiring core errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidConfigurationError(HiringCoreError):
    """
    Raised when a threshold configuration is rejected.

    Attributes:
        violations: Human-readable list of every rule the configuration broke
    """

    def __init__(self, violations: List[str], message: str = "Invalid threshold configuration"):
        super().__init__(message)
        self.violations = list(violations)

    def __str__(self) -> str:
        return f"{self.message}: {'; '.join(self.violations)}"


class DataUnavailableError(HiringCoreError):
    """Raised when an organization snapshot (or part of it) cannot be obtained."""

    def __init__(
        self,
        message: str,
        organization_id: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.organization_id = organization_id
        self.original_exception = original_exception


class TableLoadError(HiringCoreError):
    """Raised when a reference table is missing or malformed."""
