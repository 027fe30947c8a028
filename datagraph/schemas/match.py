from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from datagraph.config import ASSIGNMENT_STATUS_ASSIGNED


class MatchResult(BaseModel):
    """Score of one candidate against one project. Never persisted as-is."""

    candidate_id: str = Field(
        description="The scored candidate"
    )
    score: float = Field(
        ge=0.0,
        le=1.0,
        description="Compatibility score between the candidate and the project (0-1)"
    )


class Assignment(BaseModel):
    """A worker assigned to a project."""

    id: int | None = Field(default=None, description="Database row id")
    user_id: str = Field(description="Assigned worker")
    user_name: str | None = Field(default=None, description="Display name of the assigned worker")
    project_id: str = Field(description="Project the worker is assigned to")
    match_score: float = Field(ge=0.0, le=1.0, description="Score at assignment time")
    status: str = Field(default=ASSIGNMENT_STATUS_ASSIGNED, description="Assignment status")
    created_at: datetime | None = Field(default=None, description="When the assignment was created")


class AssignmentReport(BaseModel):
    """Outcome of assigning a single project."""

    project_id: str
    assignments: list[Assignment] = Field(default_factory=list)

    @computed_field
    @property
    def assigned_count(self) -> int:
        return len(self.assignments)

    @property
    def message(self) -> str:
        return f"Assigned project to {self.assigned_count} users"
