"""
Reference tables for the scoring engines.

Synonym families, bias categories, language patterns, health defaults,
trigger/alert rules and the diversity name fragments all live in
versioned JSON files under the configured data directory. Each table is
read once per process and handed out as read-only data; callers that
need a different table pass their own mapping to the agent constructor.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from .config import get_settings
from .exceptions import TableLoadError

logger = logging.getLogger(__name__)


# =============================================================================
# TABLE NAMES
# =============================================================================

SKILL_SYNONYMS = "skill_synonyms"
BIAS_CATEGORIES = "bias_categories"
LANGUAGE_PATTERNS = "language_patterns"
HEALTH_DEFAULTS = "health_defaults"
HEALTH_RULES = "health_rules"
DIVERSITY_INDICATORS = "diversity_indicators"
MATCH_WEIGHTS = "match_weights"


# =============================================================================
# LOADING
# =============================================================================

def _freeze(value: Any) -> Any:
    """Recursively convert dicts to mapping proxies and lists to tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


@lru_cache(maxsize=None)
def load_table(name: str) -> Mapping[str, Any]:
    """
    Load a reference table by name.

    Args:
        name: Table file name without the .json suffix

    Returns:
        Read-only mapping of the table content

    Raises:
        TableLoadError: If the file is missing, unreadable or not a JSON object
    """
    path: Path = get_settings().data_dir / f"{name}.json"
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError as e:
        raise TableLoadError(f"Reference table not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise TableLoadError(f"Reference table {path} could not be read: {e}") from e

    if not isinstance(data, dict):
        raise TableLoadError(f"Reference table {path} must contain a JSON object")

    logger.debug("Loaded table %s (version %s)", name, data.get("version", "unversioned"))
    return _freeze(data)


def clear_table_cache() -> None:
    """Forget every loaded table."""
    load_table.cache_clear()


def table_version(name: str) -> str:
    """Version string recorded in a table, or 'unversioned'."""
    return str(load_table(name).get("version", "unversioned"))


# =============================================================================
# TYPED ACCESSORS
# =============================================================================

def skill_synonyms() -> Mapping[str, Tuple[str, ...]]:
    """Canonical skill -> related/alias terms (all lower case)."""
    return load_table(SKILL_SYNONYMS)["synonyms"]


def bias_categories() -> Mapping[str, Mapping[str, Any]]:
    """Category -> {weight, terms, suggestions}."""
    return load_table(BIAS_CATEGORIES)["categories"]


def language_patterns() -> Mapping[str, Tuple[str, ...]]:
    """Word lists used by the language pattern, diversity and tone checks."""
    return load_table(LANGUAGE_PATTERNS)


def health_defaults() -> Dict[str, Any]:
    """Default threshold values as a plain (mutable) dict."""
    return _thaw(load_table(HEALTH_DEFAULTS)["thresholds"])


def health_display() -> Mapping[str, Mapping[str, str]]:
    """Status colours and labels."""
    table = load_table(HEALTH_DEFAULTS)
    return MappingProxyType({"colors": table["colors"], "status_labels": table["status_labels"]})


def trigger_rules() -> Mapping[str, Mapping[str, Any]]:
    """Trigger name -> {metric, recommendations}."""
    return load_table(HEALTH_RULES)["triggers"]


def alert_templates() -> Mapping[str, Mapping[str, Any]]:
    """Trigger name -> severity -> alert template."""
    return load_table(HEALTH_RULES)["alerts"]


def diversity_name_fragments() -> List[str]:
    """Name fragments used by the diversity ratio heuristic."""
    return list(load_table(DIVERSITY_INDICATORS)["name_fragments"])


def match_weights() -> Mapping[str, Any]:
    """Match score weights, technical split, education and job level tables."""
    return load_table(MATCH_WEIGHTS)


def _thaw(value: Any) -> Any:
    """Inverse of _freeze for callers that need to build models from a table."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value
