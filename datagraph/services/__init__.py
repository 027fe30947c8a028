"""Service layer for Datagraph project assignment."""

from datagraph.services.assignment_service import (
    AssignmentError,
    ProjectAtCapacityError,
    ProjectNotAvailableError,
    assign_project,
    auto_assign_projects,
)
from datagraph.services.import_service import load_projects_from_file, load_users_from_file

__all__ = [
    "AssignmentError",
    "ProjectAtCapacityError",
    "ProjectNotAvailableError",
    "assign_project",
    "auto_assign_projects",
    "load_projects_from_file",
    "load_users_from_file",
]
