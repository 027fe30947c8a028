"""Import service for loading projects and users from JSON files."""

import json
import logging
from pathlib import Path

from datagraph.db.connection import init_tables
from datagraph.db.projects import upsert_project
from datagraph.db.users import upsert_user
from datagraph.schemas.candidate import User
from datagraph.schemas.project import Project

logger = logging.getLogger(__name__)


def _read_json_list(file_path: Path) -> list[dict]:
    with open(file_path) as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{file_path} must contain a JSON array")
    return data


def load_projects_from_file(file_path: Path) -> int:
    """Load projects from a JSON file and upsert them into the database.

    Every entry is validated before anything is written.

    Args:
        file_path: Path to JSON file containing a list of project dicts.

    Returns:
        Number of projects written.
    """
    init_tables()

    projects = [Project(**p) for p in _read_json_list(file_path)]
    for project in projects:
        upsert_project(project)

    logger.info(f"Loaded {len(projects)} projects from {file_path}")
    return len(projects)


def load_users_from_file(file_path: Path) -> int:
    """Load user profiles from a JSON file and upsert them into the database.

    Args:
        file_path: Path to JSON file containing a list of user dicts.

    Returns:
        Number of users written.
    """
    init_tables()

    users = [User(**u) for u in _read_json_list(file_path)]
    for user in users:
        upsert_user(user)

    logger.info(f"Loaded {len(users)} users from {file_path}")
    return len(users)
