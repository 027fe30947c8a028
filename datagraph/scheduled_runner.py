"""Scheduled entrypoint for automatic project assignment.

Runs once per trigger (cron, Cloud Scheduler, ...):

1. INIT: Make sure the database tables exist
2. ASSIGN: Run auto-assignment over every published, active project with open slots

Results are persisted in the `user_projects` table and can be inspected with:
- CLI: `datagraph list-assignments`
"""

import logging
import sys
import time

from datagraph.config import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Main scheduled job execution.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    start_time = time.time()
    logger.info("Starting Datagraph scheduled runner")

    try:
        from datagraph.db.connection import init_tables

        logger.info("Step 1/2: Initializing database tables")
        init_tables()

        from datagraph.services.assignment_service import auto_assign_projects

        logger.info("Step 2/2: Auto-assigning open projects")
        stats = auto_assign_projects()
        logger.info(f"Auto-assignment complete: {stats}")

        elapsed = time.time() - start_time
        logger.info(f"Scheduled runner completed successfully in {elapsed:.2f}s")
        return 0

    except Exception as e:
        logger.exception(f"Scheduled runner failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
