"""
Scoring Orchestrator

Responsibility: Run the match scorer over batches.
Single purpose: Rank candidates for a job and recommend jobs to a candidate.

Each pair is scored independently on a thread pool. A pair that cannot be
scored is logged and left out; it never aborts the batch. The order of
equal scores is not guaranteed.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from .matcher import MatchScoreAgent
from ..core.config import get_settings
from ..schemas.candidates import CandidateSnapshot, JobRecommendation, MatchResult
from ..schemas.job import JobSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RECOMMENDATION_LIMIT = 10
DEFAULT_RECOMMENDATION_MIN_SCORE = 40

REASON_EXCELLENT = "Excellent skill match"
REASON_GOOD = "Good skill alignment"
REASON_POTENTIAL = "Potential opportunity"


def recommendation_reason(match_score: int) -> str:
    if match_score >= 80:
        return REASON_EXCELLENT
    if match_score >= 60:
        return REASON_GOOD
    return REASON_POTENTIAL


class ScoringOrchestrator:
    """
    Batch front-end for MatchScoreAgent.

    NOT responsible for:
    - Scoring arithmetic (MatchScoreAgent does that)
    - Loading candidates or jobs (the caller passes snapshots in)
    """

    def __init__(self, matcher: Optional[MatchScoreAgent] = None, max_workers: Optional[int] = None):
        self.matcher = matcher or MatchScoreAgent()
        self.max_workers = max_workers or get_settings().batch_workers

    def score(self, candidate: CandidateSnapshot, job: JobSnapshot) -> Optional[MatchResult]:
        """
        Score one pair, or None if it could not be scored.

        None means "unscored", which callers must not read as a low score.
        """
        try:
            return self.matcher.score(candidate, job)
        except Exception as e:
            logger.warning(
                "Could not score candidate %s against job %s: %s",
                getattr(candidate, "candidate_id", "?"), getattr(job, "job_id", "?"), e,
            )
            return None

    def _map(self, func: Callable[[T], Optional[MatchResult]], items: Sequence[T]) -> List[Optional[MatchResult]]:
        if not items:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(items))) as pool:
            return list(pool.map(func, items))

    def rank_candidates(self, job: JobSnapshot, candidates: Sequence[CandidateSnapshot]) -> List[MatchResult]:
        """
        Score every candidate for a job, best first.

        Unscored candidates and zero scores are left out.
        """
        results = self._map(lambda candidate: self.score(candidate, job), candidates)
        ranked = [result for result in results if result is not None and result.match_score > 0]
        ranked.sort(key=lambda result: result.match_score, reverse=True)

        skipped = sum(1 for result in results if result is None)
        if skipped:
            logger.info("Ranked %d candidates for job %s (%d unscored)", len(ranked), job.job_id, skipped)
        return ranked

    def recommend_jobs(
        self,
        candidate: CandidateSnapshot,
        jobs: Sequence[JobSnapshot],
        limit: int = DEFAULT_RECOMMENDATION_LIMIT,
        min_score: int = DEFAULT_RECOMMENDATION_MIN_SCORE,
    ) -> List[JobRecommendation]:
        """
        Open jobs scoring at least min_score for the candidate, best first.

        Args:
            candidate: Candidate to recommend jobs to
            jobs: Jobs to consider; closed postings are skipped
            limit: Maximum number of recommendations
            min_score: Lowest match score worth recommending
        """
        open_jobs = [job for job in jobs if job.is_open]
        results = self._map(lambda job: self.score(candidate, job), open_jobs)

        scored: List[Tuple[JobSnapshot, MatchResult]] = [
            (job, result) for job, result in zip(open_jobs, results)
            if result is not None and result.match_score >= min_score
        ]
        scored.sort(key=lambda pair: pair[1].match_score, reverse=True)

        return [
            JobRecommendation(job=job, match=result, reasons=[recommendation_reason(result.match_score)])
            for job, result in scored[:limit]
        ]
