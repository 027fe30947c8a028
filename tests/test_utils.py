"""Shared test utility functions."""

from datagraph.db.projects import insert_project
from datagraph.db.users import upsert_user
from datagraph.schemas.candidate import CandidateProfile, User
from datagraph.schemas.project import Project


def make_test_candidate(
    candidate_id: str = "user-1",
    skills: list[str] | None = None,
    languages: list[str] | None = None,
    experience: str | None = None,
) -> CandidateProfile:
    """Create a dummy candidate for testing."""
    return CandidateProfile(
        id=candidate_id,
        skills=skills or [],
        languages=languages or [],
        experience_level=experience,
    )


def make_test_project(
    project_id: str = "project-1",
    skills: list[str] | None = None,
    languages: list[str] | None = None,
    experience: str | None = None,
    max_assignments: int = 5,
    current_assigned_count: int = 0,
    is_published: bool = True,
    is_active: bool = True,
) -> Project:
    """Create a dummy project for testing."""
    return Project(
        id=project_id,
        title=f"Project {project_id}",
        required_skills=skills or [],
        required_languages=languages or [],
        required_experience=experience,
        max_assignments=max_assignments,
        current_assigned_count=current_assigned_count,
        is_published=is_published,
        is_active=is_active,
    )


def make_test_user(
    user_id: str,
    skills: list[str] | None = None,
    languages: list[str] | None = None,
    experience: str | None = None,
    has_onboarded: bool = True,
) -> User:
    """Create a dummy user for testing."""
    return User(
        id=user_id,
        name=f"User {user_id}",
        email=f"{user_id}@example.com",
        skills=skills or [],
        languages=languages or [],
        experience_level=experience,
        has_onboarded=has_onboarded,
    )


def seed_project(**kwargs) -> Project:
    """Insert a project built by make_test_project and return it."""
    project = make_test_project(**kwargs)
    insert_project(project)
    return project


def seed_user(user_id: str, **kwargs) -> User:
    """Insert a user built by make_test_user and return it."""
    user = make_test_user(user_id, **kwargs)
    upsert_user(user)
    return user
