import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.kpidash.models import ActivityLog, User

logger = logging.getLogger(__name__)


def actor_name(actor: User | None) -> str:
    if actor is None:
        return "Unknown User"
    return actor.full_name or actor.username or "Unknown User"


def record_activity(
    s: Session,
    *,
    actor: User | None,
    action_type: str,
    entity_type: str,
    entity_id: uuid.UUID | None = None,
    entity_name: str | None = None,
    tab_name: str | None = None,
    description: str | None = None,
) -> ActivityLog | None:
    """
    Append an activity feed row.

    Written inside a savepoint: a failed activity write is logged and dropped
    without affecting the caller's pending changes. The caller commits.
    """
    # Surface errors from the caller's own pending changes here, not as activity failures.
    s.flush()
    ev = ActivityLog(
        user_id=actor.id if actor else None,
        action_type=action_type,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_name=(entity_name or "")[:255] or None,
        tab_name=tab_name,
        description=description,
    )
    try:
        with s.begin_nested():
            s.add(ev)
    except SQLAlchemyError:
        logger.exception(
            "Activity log write failed (action=%s entity=%s:%s user=%s)",
            action_type,
            entity_type,
            entity_id,
            actor.id if actor else None,
        )
        return None
    logger.info("Activity logged: %s - %s: %s (user=%s)", action_type, entity_type, entity_name, actor.id if actor else None)
    return ev
