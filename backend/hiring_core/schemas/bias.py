"""
Bias analysis schemas.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

RISK_LOW = "Low Risk"
RISK_MEDIUM = "Medium Risk"
RISK_HIGH = "High Risk"
RISK_CRITICAL = "Critical Risk"


@dataclass
class BiasFinding:
    """One biased term found in the text, with how much it cost."""
    category: str
    term: str
    count: int
    weight: int
    total_deduction: int
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "term": self.term,
            "count": self.count,
            "weight": self.weight,
            "total_deduction": self.total_deduction,
            "suggestions": list(self.suggestions),
        }


@dataclass
class LanguagePattern:
    """An inclusive or outdated phrase and its effect on the modern score."""
    type: str  # inclusive, outdated
    term: str
    impact: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "term": self.term, "impact": self.impact}


@dataclass
class LanguageAnalysis:
    """Modernity, readability and tone of a text."""
    modern_score: int = 50
    patterns: List[LanguagePattern] = field(default_factory=list)
    readability: int = 100
    tone: str = "neutral"  # positive, challenging, neutral

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modern_score": self.modern_score,
            "patterns": [p.to_dict() for p in self.patterns],
            "readability": self.readability,
            "tone": self.tone,
        }


@dataclass
class ComplianceReport:
    eeoc_compliant: bool = True
    diversity_friendly: bool = True
    modern_language: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eeoc_compliant": self.eeoc_compliant,
            "diversity_friendly": self.diversity_friendly,
            "modern_language": self.modern_language,
        }


@dataclass
class BiasAnalysisResult:
    """
    Full bias report for a piece of text.

    Attributes:
        bias_score: 100 minus the weighted count of biased terms, floored at 0
        diversity_score: 0-100 estimate of how welcoming the text reads
        found_biases: Every biased term found
        language_analysis: Modern score, readability and tone
        risk_level: Low/Medium/High/Critical Risk bucket of bias_score
        gender_neutral: No gender-category terms found
        inclusive_language: No biased terms found at all
        recommendations: Up to five suggested edits
        compliance: Threshold checks on the three headline scores
    """
    bias_score: int
    diversity_score: int
    found_biases: List[BiasFinding]
    language_analysis: LanguageAnalysis
    risk_level: str
    gender_neutral: bool
    inclusive_language: bool
    recommendations: List[str]
    compliance: ComplianceReport

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bias_score": self.bias_score,
            "diversity_score": self.diversity_score,
            "found_biases": [b.to_dict() for b in self.found_biases],
            "language_analysis": self.language_analysis.to_dict(),
            "risk_level": self.risk_level,
            "gender_neutral": self.gender_neutral,
            "inclusive_language": self.inclusive_language,
            "recommendations": list(self.recommendations),
            "compliance": self.compliance.to_dict(),
        }
