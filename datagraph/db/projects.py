"""Project database operations."""

import json
import logging
import sqlite3
from typing import Any

import psycopg2

from datagraph.db.connection import DatabaseConnection, get_connection, load_json_list
from datagraph.schemas.project import Project

logger = logging.getLogger(__name__)

_PROJECT_COLUMNS = (
    "id", "title", "description", "category", "points_reward",
    "required_skills", "required_languages", "required_experience",
    "max_assignments", "deadline", "is_active", "is_published",
)

_SELECT_PROJECTS = """
    SELECT p.*, (
        SELECT COUNT(*) FROM user_projects up WHERE up.project_id = p.id
    ) AS assigned_count
    FROM projects p
"""


def _project_values(project: Project) -> tuple:
    return (
        project.id,
        project.title,
        project.description,
        project.category,
        project.points_reward,
        json.dumps(project.required_skills),
        json.dumps(project.required_languages),
        project.required_experience.label if project.required_experience is not None else None,
        project.max_assignments,
        project.deadline.isoformat() if project.deadline else None,
        project.is_active,
        project.is_published,
    )


def insert_project(project: Project) -> bool:
    """Insert a new project.

    Args:
        project: Project to insert.

    Returns:
        True if inserted, False if a project with the same id already exists.
    """
    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder
        try:
            cursor.execute(
                f"INSERT INTO projects ({', '.join(_PROJECT_COLUMNS)}) "
                f"VALUES ({', '.join([ph] * len(_PROJECT_COLUMNS))})",
                _project_values(project),
            )
        except (sqlite3.IntegrityError, psycopg2.IntegrityError):
            logger.debug(f"Project {project.id} already exists")
            return False
        db.commit()

    return True


def upsert_project(project: Project) -> None:
    """Insert a project or overwrite every stored field of an existing one."""
    updates = ", ".join(f"{col} = excluded.{col}" for col in _PROJECT_COLUMNS[1:])

    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder
        cursor.execute(
            f"""
            INSERT INTO projects ({', '.join(_PROJECT_COLUMNS)})
            VALUES ({', '.join([ph] * len(_PROJECT_COLUMNS))})
            ON CONFLICT (id) DO UPDATE SET {updates}
            """,
            _project_values(project),
        )
        db.commit()


def get_project(project_id: str) -> Project | None:
    """Retrieve a project by id, with its current assignment count.

    Args:
        project_id: Project identifier.

    Returns:
        Project if found, None otherwise.
    """
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder
        cursor.execute(f"{_SELECT_PROJECTS} WHERE p.id = {ph}", (project_id,))
        row = cursor.fetchone()

    if row is None:
        return None

    return _row_to_project(row)


def get_all_projects() -> list[Project]:
    """Retrieve all projects, newest first."""
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        cursor.execute(f"{_SELECT_PROJECTS} ORDER BY p.created_at DESC, p.id")
        rows = cursor.fetchall()

    return [_row_to_project(row) for row in rows]


def get_open_projects() -> list[Project]:
    """Retrieve published, active projects that still have open slots."""
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder
        cursor.execute(
            f"{_SELECT_PROJECTS} WHERE p.is_published = {ph} AND p.is_active = {ph} ORDER BY p.id",
            (True, True),
        )
        rows = cursor.fetchall()

    projects = [_row_to_project(row) for row in rows]
    return [project for project in projects if project.is_open]


def set_project_flags(
    project_id: str,
    is_published: bool | None = None,
    is_active: bool | None = None,
) -> bool:
    """Update a project's publish and/or active flags.

    Args:
        project_id: Project identifier.
        is_published: New publish state (None leaves it unchanged).
        is_active: New active state (None leaves it unchanged).

    Returns:
        True if the project exists, False otherwise.
    """
    updates: list[str] = []
    params: list[Any] = []

    with get_connection() as db:
        ph = db.placeholder
        if is_published is not None:
            updates.append(f"is_published = {ph}")
            params.append(is_published)
        if is_active is not None:
            updates.append(f"is_active = {ph}")
            params.append(is_active)

        cursor = db.cursor()
        if not updates:
            cursor.execute(f"SELECT 1 FROM projects WHERE id = {ph}", (project_id,))
            return cursor.fetchone() is not None

        cursor.execute(
            f"UPDATE projects SET {', '.join(updates)} WHERE id = {ph}",
            (*params, project_id),
        )
        updated = cursor.rowcount
        db.commit()

    return updated > 0


def delete_project(project_id: str) -> bool:
    """Delete a project together with its assignments.

    Returns:
        True if the project existed.
    """
    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder
        cursor.execute(f"DELETE FROM user_projects WHERE project_id = {ph}", (project_id,))
        cursor.execute(f"DELETE FROM projects WHERE id = {ph}", (project_id,))
        deleted = cursor.rowcount
        db.commit()

    return deleted > 0


def lock_project(db: DatabaseConnection, project_id: str) -> Any:
    """Lock a project row inside an open write transaction and return it.

    Must be called after DatabaseConnection.begin_write().
    """
    cursor = db.cursor(dictionary=True)
    ph = db.placeholder
    suffix = " FOR UPDATE" if db.is_postgres else ""
    cursor.execute(
        f"SELECT id, max_assignments FROM projects WHERE id = {ph}{suffix}",
        (project_id,),
    )
    return cursor.fetchone()


def _row_to_project(row: Any) -> Project:
    """Convert a database row to a Project object.

    Args:
        row: Database row (dict-like for both SQLite Row and psycopg2 RealDictRow).

    Returns:
        Project populated from the row, with current_assigned_count filled in.
    """
    return Project(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        category=row["category"],
        points_reward=row["points_reward"],
        required_skills=load_json_list(row["required_skills"]),
        required_languages=load_json_list(row["required_languages"]),
        required_experience=row["required_experience"],
        max_assignments=row["max_assignments"],
        current_assigned_count=row["assigned_count"],
        deadline=row["deadline"],
        is_active=bool(row["is_active"]),
        is_published=bool(row["is_published"]),
    )
