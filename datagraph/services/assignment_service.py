"""Assignment service: match eligible workers to projects and persist the result.

This service handles:
- Assigning a single project (precondition checks, scoring, atomic commit)
- Auto-assigning every published, active project with open slots

Scoring runs outside the database transaction. Only the commit step locks the
project, and it re-checks the assignment count so concurrent runs can never
push a project past max_assignments. A stale selection is recomputed from
fresh data up to ASSIGN_MAX_RETRIES times.
"""

import logging
from typing import Any

from datagraph.config import ASSIGN_MAX_RETRIES
from datagraph.db.assignments import AssignmentConflictError, create_assignments
from datagraph.db.projects import get_open_projects, get_project
from datagraph.db.users import get_eligible_candidates
from datagraph.matching.selector import select_assignments
from datagraph.schemas.match import AssignmentReport
from datagraph.schemas.project import Project

logger = logging.getLogger(__name__)


class AssignmentError(Exception):
    """Base class for user-facing assignment failures."""

    pass


class ProjectNotAvailableError(AssignmentError):
    """Raised when a project is missing, unpublished, or inactive."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__("Project not available for assignment")


class ProjectAtCapacityError(AssignmentError):
    """Raised when a project already holds max_assignments workers."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__("Project has reached maximum assignments")


def _load_assignable_project(project_id: str) -> Project:
    project = get_project(project_id)
    if project is None or not project.is_published or not project.is_active:
        raise ProjectNotAvailableError(project_id)
    if project.remaining_slots <= 0:
        raise ProjectAtCapacityError(project_id)
    return project


def _assign_once(project: Project) -> AssignmentReport:
    """Score eligible candidates for one project and commit the selection."""
    candidates = get_eligible_candidates(project.id)
    logger.info(f"Project {project.id}: {len(candidates)} eligible candidates")

    selected = select_assignments(project, candidates)
    if not selected:
        logger.info(f"Project {project.id}: no qualified candidates")
        return AssignmentReport(project_id=project.id)

    assignments = create_assignments(
        project_id=project.id,
        expected_count=project.current_assigned_count,
        matches=selected,
    )
    return AssignmentReport(project_id=project.id, assignments=assignments)


def assign_project(project_id: str, max_retries: int | None = None) -> AssignmentReport:
    """Assign the best-matching eligible workers to a project.

    Args:
        project_id: Project to assign.
        max_retries: Attempts before giving up on concurrent conflicts
            (None uses ASSIGN_MAX_RETRIES).

    Returns:
        AssignmentReport with the created assignments (possibly none).

    Raises:
        ProjectNotAvailableError: If the project is missing, unpublished, or inactive.
        ProjectAtCapacityError: If the project has no open slots.
        AssignmentConflictError: If every attempt collided with a concurrent run.
    """
    if max_retries is None:
        max_retries = ASSIGN_MAX_RETRIES
    attempts = max(1, max_retries)

    attempt = 0
    while True:
        attempt += 1
        project = _load_assignable_project(project_id)
        try:
            report = _assign_once(project)
        except AssignmentConflictError as e:
            if attempt >= attempts:
                logger.error(f"Giving up on project {project_id} after {attempt} attempts: {e}")
                raise
            logger.warning(f"Conflict assigning project {project_id} (attempt {attempt}): {e}")
            continue

        logger.info(report.message)
        return report


def auto_assign_projects(max_retries: int | None = None) -> dict[str, Any]:
    """Assign every published, active project that still has open slots.

    Projects that fill up or conflict repeatedly are logged and skipped;
    the run continues with the next project.

    Returns:
        Dict with statistics:
        - projects_considered: Open projects found
        - projects_assigned: Projects that received at least one assignment
        - projects_failed: Projects skipped because of errors
        - total_assignments: Assignments created across all projects
    """
    stats = {
        "projects_considered": 0,
        "projects_assigned": 0,
        "projects_failed": 0,
        "total_assignments": 0,
    }

    projects = get_open_projects()
    stats["projects_considered"] = len(projects)
    logger.info(f"Found {len(projects)} open projects")

    for project in projects:
        try:
            report = assign_project(project.id, max_retries=max_retries)
        except ProjectAtCapacityError:
            logger.info(f"Project {project.id} filled up before assignment, skipping")
            continue
        except (ProjectNotAvailableError, AssignmentConflictError) as e:
            logger.warning(f"Skipping project {project.id}: {e}")
            stats["projects_failed"] += 1
            continue

        if report.assigned_count:
            stats["projects_assigned"] += 1
        stats["total_assignments"] += report.assigned_count

    logger.info(f"Auto-assigned {stats['total_assignments']} project assignments")
    return stats
