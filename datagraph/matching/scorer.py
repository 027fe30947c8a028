"""Compatibility scoring between a worker and a project."""

from pydantic import BaseModel, Field

from datagraph.config import EXPERIENCE_WEIGHT, LANGUAGE_WEIGHT, SKILL_WEIGHT
from datagraph.schemas.candidate import CandidateProfile
from datagraph.schemas.project import ProjectRequirements


class ScoringWeights(BaseModel):
    """Relative weight of each scoring factor."""

    skills: float = Field(default=SKILL_WEIGHT, ge=0.0)
    languages: float = Field(default=LANGUAGE_WEIGHT, ge=0.0)
    experience: float = Field(default=EXPERIENCE_WEIGHT, ge=0.0)


DEFAULT_WEIGHTS = ScoringWeights()


def overlap_ratio(required: list[str], offered: list[str]) -> float:
    """Fraction of required terms present in offered terms, ignoring case.

    Args:
        required: Terms the project asks for (must be non-empty).
        offered: Terms the candidate declared.

    Returns:
        Ratio in [0, 1].
    """
    offered_lower = {term.lower() for term in offered}
    required_lower = [term.lower() for term in required]
    matched = sum(1 for term in required_lower if term in offered_lower)
    return matched / len(required_lower)


def experience_ratio(candidate_level: int, required_level: int) -> float:
    """Credit for experience: full at or above the bar, linear below it."""
    if candidate_level >= required_level:
        return 1.0
    return candidate_level / required_level


def compute_match_score(
    candidate: CandidateProfile,
    project: ProjectRequirements,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> float:
    """Compute how well a candidate fits a project's requirements.

    Each factor only counts when the project states that requirement (and, for
    experience, when the candidate declared a level). The result is the
    weighted sum divided by the sum of the weights that applied, so a project
    with a single requirement can still reach 1.0.

    A project with no requirements scores 0 for everyone.

    Args:
        candidate: Candidate skills, languages and experience.
        project: Project requirements.
        weights: Factor weights.

    Returns:
        Score in [0, 1].
    """
    score = 0.0
    applied_weight = 0.0

    if project.required_skills:
        score += overlap_ratio(project.required_skills, candidate.skills) * weights.skills
        applied_weight += weights.skills

    if project.required_languages:
        score += overlap_ratio(project.required_languages, candidate.languages) * weights.languages
        applied_weight += weights.languages

    if project.required_experience is not None and candidate.experience_level is not None:
        ratio = experience_ratio(int(candidate.experience_level), int(project.required_experience))
        score += ratio * weights.experience
        applied_weight += weights.experience

    if applied_weight <= 0:
        return 0.0

    return min(1.0, max(0.0, score / applied_weight))
