"""
Reset the configured store to an empty todo list.

Usage:
    python -m todo_calendar.api.seed
"""
import logging

from ..logging_config import setup_logging
from .repositories import get_repository
from .settings import get_settings

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file or None)
    removed = get_repository().clear()
    logger.info("Store cleared, removed %d todo(s)", removed)
    print("Database cleared - starting with empty todo list")
    return removed


if __name__ == "__main__":
    main()
