"""User (worker) database operations."""

import json
from typing import Any

from datagraph.db.connection import get_connection, load_json_list
from datagraph.schemas.candidate import CandidateProfile, User
from datagraph.schemas.project import ExperienceLevel


def _experience_label(level: ExperienceLevel | None) -> str | None:
    return level.label if level is not None else None


def upsert_user(user: User) -> None:
    """Insert a user or overwrite the stored profile of an existing one.

    Args:
        user: User profile to store.
    """
    with get_connection() as db:
        cursor = db.cursor()
        ph = db.placeholder
        cursor.execute(
            f"""
            INSERT INTO users (id, name, email, skills, languages, experience_level, has_onboarded)
            VALUES ({ph}, {ph}, {ph}, {ph}, {ph}, {ph}, {ph})
            ON CONFLICT (id) DO UPDATE SET
                name = excluded.name,
                email = excluded.email,
                skills = excluded.skills,
                languages = excluded.languages,
                experience_level = excluded.experience_level,
                has_onboarded = excluded.has_onboarded
            """,
            (
                user.id,
                user.name,
                user.email,
                json.dumps(user.skills),
                json.dumps(user.languages),
                _experience_label(user.experience_level),
                user.has_onboarded,
            ),
        )
        db.commit()


def get_user(user_id: str) -> User | None:
    """Retrieve a user by id."""
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder
        cursor.execute(f"SELECT * FROM users WHERE id = {ph}", (user_id,))
        row = cursor.fetchone()

    if row is None:
        return None

    return _row_to_user(row)


def get_all_users() -> list[User]:
    """Retrieve all users ordered by id."""
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        cursor.execute("SELECT * FROM users ORDER BY id")
        rows = cursor.fetchall()

    return [_row_to_user(row) for row in rows]


def complete_onboarding(
    user_id: str,
    skills: list[str],
    languages: list[str],
    experience_level: ExperienceLevel | str | None = None,
) -> User | None:
    """Store a user's onboarding answers and mark them as onboarded.

    Args:
        user_id: User identifier.
        skills: Declared skills.
        languages: Declared languages.
        experience_level: Declared experience level.

    Returns:
        The updated User, or None if the user does not exist.
    """
    existing = get_user(user_id)
    if existing is None:
        return None

    updated = User(
        id=existing.id,
        name=existing.name,
        email=existing.email,
        skills=skills,
        languages=languages,
        experience_level=experience_level,
        has_onboarded=True,
    )
    upsert_user(updated)
    return updated


def get_eligible_candidates(project_id: str) -> list[CandidateProfile]:
    """Get candidates that may be scored for a project.

    A candidate has completed onboarding, declared at least one skill or
    language, and is not already assigned to the project.

    Args:
        project_id: Project the candidates would be assigned to.

    Returns:
        Candidate profiles ordered by user id.
    """
    with get_connection() as db:
        cursor = db.cursor(dictionary=True)
        ph = db.placeholder
        cursor.execute(
            f"""
            SELECT u.* FROM users u
            WHERE u.has_onboarded = {ph}
              AND u.id NOT IN (
                  SELECT up.user_id FROM user_projects up WHERE up.project_id = {ph}
              )
            ORDER BY u.id
            """,
            (True, project_id),
        )
        rows = cursor.fetchall()

    users = [_row_to_user(row) for row in rows]
    return [user.to_candidate() for user in users if user.is_matchable]


def _row_to_user(row: Any) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        skills=load_json_list(row["skills"]),
        languages=load_json_list(row["languages"]),
        experience_level=row["experience_level"],
        has_onboarded=bool(row["has_onboarded"]),
    )
