from datetime import datetime
from enum import IntEnum

from pydantic import BaseModel, Field, field_validator


class ExperienceLevel(IntEnum):
    """Experience levels in ascending order.

    The integer values are the ordinals used by the experience factor of the
    match score. Use _missing_ for case-insensitive string parsing (e.g., from
    onboarding forms or JSON imports).
    """

    BEGINNER = 0
    INTERMEDIATE = 1
    ADVANCED = 2
    EXPERT = 3

    @classmethod
    def _missing_(cls, value):
        """Allow case-insensitive string lookup."""
        if isinstance(value, str):
            value_lower = value.strip().lower()
            for member in cls:
                if member.name.lower() == value_lower:
                    return member
        return None

    @property
    def label(self) -> str:
        """Display name, e.g. 'Intermediate'."""
        return self.name.capitalize()


def _clean_terms(values: list[str]) -> list[str]:
    """Strip whitespace and drop blank entries."""
    return [v.strip() for v in values if v and v.strip()]


class ProjectRequirements(BaseModel):
    """What a project asks of the workers assigned to it."""

    required_skills: list[str] = Field(
        default_factory=list,
        description="Skills a worker should have (case-insensitive)"
    )
    required_languages: list[str] = Field(
        default_factory=list,
        description="Human languages a worker should speak (case-insensitive)"
    )
    required_experience: ExperienceLevel | None = Field(
        default=None,
        description="Minimum experience level: beginner, intermediate, advanced, or expert"
    )

    @field_validator("required_skills", "required_languages")
    @classmethod
    def _strip_terms(cls, values: list[str]) -> list[str]:
        return _clean_terms(values)

    @field_validator("required_experience", mode="before")
    @classmethod
    def _blank_experience_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Project(ProjectRequirements):
    """An annotation project that workers can be assigned to."""

    id: str = Field(min_length=1, description="Unique identifier for the project")
    title: str = Field(description="Project title")
    description: str | None = Field(default=None, description="Project description")
    category: str | None = Field(default=None, description="Project category")
    points_reward: int = Field(default=0, ge=0, description="Vibe Points awarded on completion")
    max_assignments: int = Field(gt=0, description="Maximum number of assigned workers")
    current_assigned_count: int = Field(
        default=0,
        ge=0,
        description="Number of workers already assigned (computed from the assignment store)"
    )
    deadline: datetime | None = Field(default=None, description="Submission deadline")
    is_active: bool = Field(default=True, description="Whether the project accepts work")
    is_published: bool = Field(default=False, description="Whether workers can see the project")

    @property
    def remaining_slots(self) -> int:
        """Number of additional assignments the project can still accept."""
        return max(0, self.max_assignments - self.current_assigned_count)

    @property
    def is_open(self) -> bool:
        """Published, active, and not yet at capacity."""
        return self.is_published and self.is_active and self.remaining_slots > 0
