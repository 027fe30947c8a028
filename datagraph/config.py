import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths (local development only)
DATA_DIR = Path("data")
DB_PATH = DATA_DIR / "datagraph.db"

# Database (PostgreSQL in production, SQLite otherwise)
DATABASE_URL = os.getenv("DATABASE_URL")

# Match scoring weights
SKILL_WEIGHT = 0.4
LANGUAGE_WEIGHT = 0.3
EXPERIENCE_WEIGHT = 0.3

# Candidates scoring below this are never assigned
QUALIFICATION_THRESHOLD = 0.3
SCORE_EPSILON = 1e-9

# Assignments
ASSIGNMENT_STATUS_ASSIGNED = "assigned"
ASSIGN_MAX_RETRIES = int(os.getenv("DATAGRAPH_ASSIGN_MAX_RETRIES", "3"))

LOG_LEVEL = os.getenv("DATAGRAPH_LOG_LEVEL", "INFO").upper()
