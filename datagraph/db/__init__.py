"""Database connection module."""

from datagraph.db.assignments import (
    AssignmentConflictError,
    count_assignments,
    create_assignments,
    get_assignments,
)
from datagraph.db.connection import get_connection, init_tables
from datagraph.db.projects import (
    delete_project,
    get_all_projects,
    get_open_projects,
    get_project,
    insert_project,
    set_project_flags,
    upsert_project,
)
from datagraph.db.users import (
    complete_onboarding,
    get_all_users,
    get_eligible_candidates,
    get_user,
    upsert_user,
)

__all__ = [
    "get_connection",
    "init_tables",
    "insert_project",
    "upsert_project",
    "get_project",
    "get_all_projects",
    "get_open_projects",
    "set_project_flags",
    "delete_project",
    "upsert_user",
    "get_user",
    "get_all_users",
    "complete_onboarding",
    "get_eligible_candidates",
    "AssignmentConflictError",
    "create_assignments",
    "count_assignments",
    "get_assignments",
]
