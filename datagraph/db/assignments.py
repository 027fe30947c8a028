"""Assignment (user_projects) database operations."""

import logging
import sqlite3
from datetime import UTC, datetime
from typing import Any

import psycopg2

from datagraph.config import ASSIGNMENT_STATUS_ASSIGNED
from datagraph.db.connection import get_connection
from datagraph.db.projects import lock_project
from datagraph.schemas.match import Assignment, MatchResult

logger = logging.getLogger(__name__)


class AssignmentConflictError(Exception):
    """Raised when a project's assignments changed while new ones were being written."""

    pass


def count_assignments(project_id: str) -> int:
    """Count assignments held by a project."""
    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder
        cursor.execute(
            f"SELECT COUNT(*) FROM user_projects WHERE project_id = {ph}",
            (project_id,),
        )
        row = cursor.fetchone()

    return row[0]


def create_assignments(
    project_id: str,
    expected_count: int,
    matches: list[MatchResult],
) -> list[Assignment]:
    """Persist selected matches as assignments in one transaction.

    The project row is locked and its assignment count re-read. If the count
    no longer equals expected_count (another run assigned workers since the
    selection was computed), nothing is written.

    Args:
        project_id: Project being assigned.
        expected_count: Assignment count the selection was computed against.
        matches: Selected candidates and their scores.

    Returns:
        Created assignments, in the order of matches.

    Raises:
        AssignmentConflictError: If the project changed concurrently, vanished,
            or a candidate is already assigned.
    """
    if not matches:
        return []

    now = datetime.now(UTC)
    created: list[Assignment] = []

    with get_connection() as db:
        ph = db.placeholder
        try:
            db.begin_write()
            project_row = lock_project(db, project_id)
            if project_row is None:
                raise AssignmentConflictError(f"Project {project_id} no longer exists")

            cursor = db.cursor()
            cursor.execute(
                f"SELECT COUNT(*) FROM user_projects WHERE project_id = {ph}",
                (project_id,),
            )
            current_count = cursor.fetchone()[0]

            if current_count != expected_count:
                raise AssignmentConflictError(
                    f"Project {project_id} has {current_count} assignments, "
                    f"expected {expected_count}"
                )
            if current_count + len(matches) > project_row["max_assignments"]:
                raise AssignmentConflictError(
                    f"Project {project_id} cannot take {len(matches)} more assignments"
                )

            user_ids = [match.candidate_id for match in matches]
            cursor.execute(
                f"SELECT id, name FROM users WHERE id IN ({', '.join([ph] * len(user_ids))})",
                tuple(user_ids),
            )
            names = {row[0]: row[1] for row in cursor.fetchall()}

            for match in matches:
                assignment = Assignment(
                    user_id=match.candidate_id,
                    user_name=names.get(match.candidate_id),
                    project_id=project_id,
                    match_score=match.score,
                    status=ASSIGNMENT_STATUS_ASSIGNED,
                    created_at=now,
                )
                cursor.execute(
                    f"""
                    INSERT INTO user_projects (user_id, project_id, match_score, status, created_at)
                    VALUES ({ph}, {ph}, {ph}, {ph}, {ph})
                    """,
                    (
                        assignment.user_id,
                        assignment.project_id,
                        assignment.match_score,
                        assignment.status,
                        now.isoformat(),
                    ),
                )
                created.append(assignment)

            db.commit()
        except (sqlite3.IntegrityError, psycopg2.IntegrityError) as e:
            db.rollback()
            raise AssignmentConflictError(
                f"Could not assign project {project_id}: {e}"
            ) from e
        except Exception:
            db.rollback()
            raise

    logger.info(f"Created {len(created)} assignments for project {project_id}")
    return created


def get_assignments(project_id: str | None = None) -> list[Assignment]:
    """Retrieve assignments, optionally for a single project.

    Args:
        project_id: Optional project filter.

    Returns:
        Assignments ordered by project, then score descending.
    """
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder

        if project_id:
            cursor.execute(
                f"""
                SELECT a.*, u.name AS user_name
                FROM user_projects a LEFT JOIN users u ON u.id = a.user_id
                WHERE a.project_id = {ph}
                ORDER BY a.match_score DESC, a.user_id
                """,
                (project_id,),
            )
        else:
            cursor.execute(
                """
                SELECT a.*, u.name AS user_name
                FROM user_projects a LEFT JOIN users u ON u.id = a.user_id
                ORDER BY a.project_id, a.match_score DESC, a.user_id
                """
            )
        rows = cursor.fetchall()

    return [_row_to_assignment(row) for row in rows]


def _row_to_assignment(row: Any) -> Assignment:
    return Assignment(
        id=row["id"],
        user_id=row["user_id"],
        user_name=row["user_name"],
        project_id=row["project_id"],
        match_score=row["match_score"],
        status=row["status"],
        created_at=row["created_at"],
    )
