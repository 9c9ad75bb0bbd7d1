"""
Periodic maintenance job.

This script should be run regularly (e.g. hourly) to:
1. Prune rate-limit events that fell out of the window
2. Audit vote counters and karma against the rows that justify them
"""

import logging
import sys

from sqlalchemy.orm import Session

from ventboard.core.settings import settings
from ventboard.db.session import session_scope
from ventboard.services.audit import audit_all
from ventboard.services.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


def prune_rate_limit_events(db: Session) -> int:
    """Delete expired rate-limit events.

    Args:
        db: Database session
    """
    removed = RateLimiter(db).prune_expired()
    db.commit()
    logger.info("Pruned %d expired rate-limit events", removed)
    return removed


def audit_counters(db: Session) -> list[str]:
    """Report every counter or karma mismatch.

    Args:
        db: Database session
    """
    failures = audit_all(db)
    for failure in failures:
        logger.error("Audit failure: %s", failure)
    if not failures:
        logger.info("Vote counters and karma are consistent")
    return failures


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    with session_scope() as db:
        prune_rate_limit_events(db)
        failed = audit_counters(db)
    sys.exit(1 if failed else 0)
