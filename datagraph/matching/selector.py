"""Capacity-limited selection of workers for a project."""

import logging
from collections.abc import Iterable

from datagraph.config import QUALIFICATION_THRESHOLD, SCORE_EPSILON
from datagraph.matching.scorer import DEFAULT_WEIGHTS, ScoringWeights, compute_match_score
from datagraph.schemas.candidate import CandidateProfile
from datagraph.schemas.match import MatchResult
from datagraph.schemas.project import Project

logger = logging.getLogger(__name__)


class InvalidAssignmentInput(ValueError):
    """Raised when the project or a candidate is malformed."""

    pass


def _validate_inputs(project: Project, candidates: list[CandidateProfile]) -> None:
    max_assignments = project.max_assignments
    if (
        isinstance(max_assignments, bool)
        or not isinstance(max_assignments, int)
        or max_assignments <= 0
    ):
        raise InvalidAssignmentInput(
            f"Project {project.id!r} has invalid max_assignments: {max_assignments!r}"
        )

    for candidate in candidates:
        if not getattr(candidate, "id", None):
            raise InvalidAssignmentInput("Candidate profile is missing an id")


def qualifies(score: float, threshold: float = QUALIFICATION_THRESHOLD) -> bool:
    """Whether a score clears the qualification threshold."""
    return score >= threshold - SCORE_EPSILON


def score_candidates(
    project: Project,
    candidates: Iterable[CandidateProfile],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[MatchResult]:
    """Score every candidate against the project, in input order."""
    return [
        MatchResult(
            candidate_id=candidate.id,
            score=compute_match_score(candidate, project, weights),
        )
        for candidate in candidates
    ]


def select_assignments(
    project: Project,
    candidates: Iterable[CandidateProfile],
    threshold: float = QUALIFICATION_THRESHOLD,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[MatchResult]:
    """Pick the best-scoring candidates for the project's open slots.

    Candidates below the threshold are never selected. The rest are ordered by
    score descending, then candidate id ascending, and truncated to the
    project's remaining slots.

    Args:
        project: Project with requirements and capacity.
        candidates: Eligible, not-yet-assigned candidates.
        threshold: Minimum qualifying score.
        weights: Factor weights passed to the scorer.

    Returns:
        Selected (candidate_id, score) results, best first.

    Raises:
        InvalidAssignmentInput: If max_assignments is not a positive integer
            or a candidate has no id.
    """
    candidates = list(candidates)
    _validate_inputs(project, candidates)

    remaining_slots = project.max_assignments - project.current_assigned_count
    if remaining_slots <= 0:
        return []

    scored = score_candidates(project, candidates, weights)
    qualified = [match for match in scored if qualifies(match.score, threshold)]
    qualified.sort(key=lambda m: (-m.score, m.candidate_id))

    selected = qualified[:remaining_slots]
    logger.debug(
        f"Project {project.id}: {len(candidates)} candidates, "
        f"{len(qualified)} qualified, {len(selected)} selected"
    )
    return selected
