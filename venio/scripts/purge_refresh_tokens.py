"""
CLI entrypoint for the refresh token cleanup job. Run from cron, e.g.:

  python -m venio.scripts.purge_refresh_tokens

Or daily: 0 3 * * * cd /path/to/venio && .venv/bin/python -m venio.scripts.purge_refresh_tokens
"""

import logging
import sys

from venio.core.config import get_settings
from venio.core.database import SessionLocal
from venio.core.logging_config import configure_logging
from venio.repositories import RefreshTokenRepository

logger = logging.getLogger(__name__)


def main() -> int:
    """Delete refresh tokens past their expiry (revoked or not)."""
    configure_logging(get_settings().LOG_LEVEL)
    db = SessionLocal()
    try:
        deleted = RefreshTokenRepository().delete_expired(db)
        logger.info("Refresh token purge completed: tokens_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Refresh token purge failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
