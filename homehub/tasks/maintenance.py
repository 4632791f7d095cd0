"""
Maintenance Tasks
Periodic housekeeping run by Celery Beat.
"""

import logging
from typing import Any, Dict

from .celery_app import app

logger = logging.getLogger(__name__)


@app.task(bind=True, name="tasks.cleanup_expired_drafts", max_retries=2, default_retry_delay=300)
def cleanup_expired_drafts(self) -> Dict[str, Any]:
    """
    Delete listing drafts past their expiry.

    Returns:
        Dictionary with the number of drafts deleted
    """
    from sqlalchemy.exc import SQLAlchemyError

    # Import here to avoid circular imports at worker start
    from ..db.session import get_session_factory
    from ..api.services.draft_service import cleanup_expired_drafts as cleanup

    db = get_session_factory()()
    try:
        deleted = cleanup(db)
        return {"status": "success", "deleted_count": deleted}
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Draft cleanup failed: {e}", exc_info=True)
        if self.request.called_directly or app.conf.task_always_eager:
            return {"status": "error", "error": str(e), "deleted_count": 0}
        raise self.retry(exc=e)
    finally:
        db.close()
