"""
Admin Audit Trail
Records admin decisions in admin_actions.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...db.models import AdminAction

logger = logging.getLogger(__name__)


def record_admin_action(
    db: Session,
    admin_id,
    action_type: str,
    target_type: str,
    target_id,
    details: Optional[Dict[str, Any]] = None,
) -> Optional[AdminAction]:
    """
    Add an audit row inside a savepoint.

    A failed insert is rolled back to the savepoint and logged, so the decision
    being audited still commits.
    """
    try:
        with db.begin_nested():
            action = AdminAction(
                admin_id=admin_id,
                action_type=action_type,
                target_type=target_type,
                target_id=str(target_id),
                details=details or {},
            )
            db.add(action)
        return action
    except SQLAlchemyError as e:
        logger.warning(f"Failed to record admin action {action_type} on {target_id}: {e}")
        return None
