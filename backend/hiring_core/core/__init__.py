# Core scoring primitives, configuration and reference tables
from .exceptions import (
    HiringCoreError,
    InvalidConfigurationError,
    DataUnavailableError,
    TableLoadError,
)
from .similarity import levenshtein_distance, string_similarity
from .skills import SkillMatcher

__all__ = [
    "HiringCoreError",
    "InvalidConfigurationError",
    "DataUnavailableError",
    "TableLoadError",
    "levenshtein_distance",
    "string_similarity",
    "SkillMatcher",
]
