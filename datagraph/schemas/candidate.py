from pydantic import BaseModel, Field, field_validator

from datagraph.schemas.project import ExperienceLevel, _clean_terms


class CandidateProfile(BaseModel):
    """The parts of a worker's profile that the match score looks at."""

    id: str = Field(min_length=1, description="Unique identifier for the worker")
    skills: list[str] = Field(
        default_factory=list,
        description="Skills declared during onboarding"
    )
    languages: list[str] = Field(
        default_factory=list,
        description="Human languages declared during onboarding"
    )
    experience_level: ExperienceLevel | None = Field(
        default=None,
        description="Self-declared experience level"
    )

    @field_validator("skills", "languages")
    @classmethod
    def _strip_terms(cls, values: list[str]) -> list[str]:
        return _clean_terms(values)

    @field_validator("experience_level", mode="before")
    @classmethod
    def _blank_experience_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class User(CandidateProfile):
    """A registered worker as stored in the database."""

    name: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Contact email")
    has_onboarded: bool = Field(
        default=False,
        description="Whether the worker completed the onboarding form"
    )

    @property
    def is_matchable(self) -> bool:
        """Onboarded and declared at least one skill or language."""
        return self.has_onboarded and bool(self.skills or self.languages)

    def to_candidate(self) -> CandidateProfile:
        return CandidateProfile(
            id=self.id,
            skills=self.skills,
            languages=self.languages,
            experience_level=self.experience_level,
        )
