"""
Bias Analyzer Agent

Responsibility: Flag potentially exclusionary language in free text.
Single purpose: Score a job posting (or any text) for biased terms,
diversity signals, language modernity, readability and tone.

This agent does NOT rewrite text - it only reports findings and
suggestions.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .base import AgentResult, BaseAgent, ScoringState
from ..core import tables
from ..schemas.bias import (
    RISK_CRITICAL,
    RISK_HIGH,
    RISK_LOW,
    RISK_MEDIUM,
    BiasAnalysisResult,
    BiasFinding,
    ComplianceReport,
    LanguageAnalysis,
    LanguagePattern,
)
from ..schemas.job import JobSnapshot

logger = logging.getLogger(__name__)

PERFECT_SCORE = 100
MODERN_SCORE_BASE = 50
INCLUSIVE_IMPACT = 5
OUTDATED_IMPACT = -3
DIVERSITY_PENALTY_PER_FINDING = 5
DIVERSITY_BONUS_PER_TERM = 3
COMPLIANCE_CUTOFF = 70
ADVICE_CUTOFF = 60
MAX_RECOMMENDATIONS = 5

TONE_POSITIVE = "positive"
TONE_CHALLENGING = "challenging"
TONE_NEUTRAL = "neutral"


@dataclass
class BiasInput:
    """Input for the bias analyzer: raw text or a job posting."""
    text: Optional[str] = None
    job: Optional[JobSnapshot] = None

    def resolve_text(self) -> str:
        if self.job is not None:
            return job_posting_text(self.job)
        return self.text or ""


def job_posting_text(job: JobSnapshot) -> str:
    """The text checked for a posting: description followed by title."""
    return f"{job.description or ''} {job.title or ''}"


@lru_cache(maxsize=512)
def _term_pattern(term: str) -> "re.Pattern[str]":
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


def risk_level(bias_score: float) -> str:
    """Bucket a bias score: >= 80 low, >= 60 medium, >= 40 high, else critical."""
    if bias_score >= 80:
        return RISK_LOW
    if bias_score >= 60:
        return RISK_MEDIUM
    if bias_score >= 40:
        return RISK_HIGH
    return RISK_CRITICAL


class BiasAnalyzerAgent(BaseAgent[BiasInput, BiasAnalysisResult]):
    """
    Scans text for biased terms across seven categories.

    Input: BiasInput (text or JobSnapshot)
    Output: BiasAnalysisResult

    Every whole-word, case-insensitive occurrence of a category term
    deducts the category weight from a starting score of 100. The
    reported score is floored at 0.
    """

    name = "bias_analyzer"
    description = (
        "Flags gendered, age-related, familial, cultural, socioeconomic, "
        "ableist and jargon terms and scores inclusivity."
    )

    def __init__(
        self,
        agent_id: Optional[str] = None,
        categories: Optional[Mapping[str, Mapping[str, Any]]] = None,
        patterns: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        super().__init__(agent_id)
        self.categories = categories if categories is not None else tables.bias_categories()
        self.patterns = patterns if patterns is not None else tables.language_patterns()

    # -------------------------------------------------------------------------
    # Agent contract
    # -------------------------------------------------------------------------

    def run(
        self,
        input_data: BiasInput,
        state: Optional[ScoringState] = None
    ) -> AgentResult[BiasAnalysisResult]:
        if state is None:
            state = ScoringState()

        try:
            trace: List[str] = []
            text = input_data.resolve_text()
            self.log_reasoning(trace, f"Analyzing {len(text.split())} words")

            result = self.analyze(text)
            self.log_reasoning(trace, f"{len(result.found_biases)} biased terms found")
            self.log_reasoning(trace, f"Bias score {result.bias_score} ({result.risk_level})")

            explanation = (
                f"Bias score {result.bias_score} ({result.risk_level}), "
                f"diversity score {result.diversity_score}, "
                f"{len(result.found_biases)} terms flagged."
            )
        except Exception as e:
            logger.exception("Bias analysis failed")
            return self._failure(
                state=state,
                error=str(e),
                explanation=f"Bias analysis failed: {e}",
            )

        return self._success(
            output=result,
            state=state,
            confidence=1.0,
            explanation=explanation,
            metadata={
                "reasoning": trace,
                "table_version": tables.table_version(tables.BIAS_CATEGORIES),
            },
        )

    # -------------------------------------------------------------------------
    # Analysis API
    # -------------------------------------------------------------------------

    def analyze(self, text: Optional[str]) -> BiasAnalysisResult:
        """
        Full bias report for a piece of text.

        None or blank text has nothing to flag and gets a perfect score.
        """
        if not isinstance(text, str):
            text = ""

        raw_score, findings = self.find_biases(text)
        language = self.analyze_language_patterns(text)
        diversity = self.diversity_score(text, findings)
        bias_score = max(raw_score, 0)

        return BiasAnalysisResult(
            bias_score=bias_score,
            diversity_score=diversity,
            found_biases=findings,
            language_analysis=language,
            risk_level=risk_level(raw_score),
            gender_neutral=not any(f.category == "gender" for f in findings),
            inclusive_language=not findings,
            recommendations=self.recommendations(findings, language),
            compliance=ComplianceReport(
                eeoc_compliant=raw_score >= COMPLIANCE_CUTOFF,
                diversity_friendly=diversity >= COMPLIANCE_CUTOFF,
                modern_language=language.modern_score >= COMPLIANCE_CUTOFF,
            ),
        )

    def analyze_job_posting(self, job: JobSnapshot) -> BiasAnalysisResult:
        """Analyze a posting's description and title together."""
        return self.analyze(job_posting_text(job))

    def find_biases(self, text: str) -> Tuple[int, List[BiasFinding]]:
        """
        Unfloored bias score and every finding, in category table order.
        """
        score = PERFECT_SCORE
        findings: List[BiasFinding] = []
        if not text:
            return score, findings

        for category, config in self.categories.items():
            weight = int(config["weight"])
            for term in config["terms"]:
                count = len(_term_pattern(term).findall(text))
                if not count:
                    continue
                deduction = weight * count
                score -= deduction
                findings.append(BiasFinding(
                    category=category,
                    term=term,
                    count=count,
                    weight=weight,
                    total_deduction=deduction,
                    suggestions=list(config.get("suggestions", ())),
                ))
        return score, findings

    def analyze_language_patterns(self, text: str) -> LanguageAnalysis:
        """Modern-language score, matched patterns, readability and tone."""
        text_lower = text.lower()
        modern_score = MODERN_SCORE_BASE
        patterns: List[LanguagePattern] = []

        for term in self.patterns["inclusive"]:
            if term.lower() in text_lower:
                modern_score += INCLUSIVE_IMPACT
                patterns.append(LanguagePattern(type="inclusive", term=term, impact=INCLUSIVE_IMPACT))

        for term in self.patterns["outdated"]:
            if term.lower() in text_lower:
                modern_score += OUTDATED_IMPACT
                patterns.append(LanguagePattern(type="outdated", term=term, impact=OUTDATED_IMPACT))

        return LanguageAnalysis(
            modern_score=max(0, min(100, modern_score)),
            patterns=patterns,
            readability=self.readability(text),
            tone=self.tone(text),
        )

    def diversity_score(self, text: str, findings: Sequence[BiasFinding]) -> int:
        """100, minus 5 per finding, plus 3 per diversity-friendly term present."""
        text_lower = text.lower()
        score = PERFECT_SCORE - len(findings) * DIVERSITY_PENALTY_PER_FINDING
        score += DIVERSITY_BONUS_PER_TERM * sum(
            1 for term in self.patterns["diversity_friendly"] if term in text_lower
        )
        return max(0, min(100, score))

    @staticmethod
    def readability(text: str) -> int:
        """100, minus 20 above 20 words per sentence and 20 more above 25."""
        if not text.strip():
            return PERFECT_SCORE
        sentences = len(re.split(r"[.!?]+", text))
        words = len(re.split(r"\s+", text))
        avg_words = words / sentences

        score = PERFECT_SCORE
        if avg_words > 20:
            score -= 20
        if avg_words > 25:
            score -= 20
        return max(0, min(100, score))

    def tone(self, text: str) -> str:
        text_lower = text.lower()
        positive = sum(1 for word in self.patterns["positive_tone"] if word in text_lower)
        negative = sum(1 for word in self.patterns["negative_tone"] if word in text_lower)
        if positive > negative:
            return TONE_POSITIVE
        if negative > positive:
            return TONE_CHALLENGING
        return TONE_NEUTRAL

    def recommendations(self, findings: Sequence[BiasFinding], language: LanguageAnalysis) -> List[str]:
        """Finding suggestions then generic advice, deduplicated, first five."""
        suggestions: List[str] = []
        for finding in findings:
            suggestions.extend(finding.suggestions)
        if language.modern_score < ADVICE_CUTOFF:
            suggestions.extend(self.patterns["modernization_advice"])
        if language.readability < ADVICE_CUTOFF:
            suggestions.extend(self.patterns["readability_advice"])
        return list(dict.fromkeys(suggestions))[:MAX_RECOMMENDATIONS]

