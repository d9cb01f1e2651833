# Overview: Service-layer operations for notifications; persist then push.

"""
Notification Emitter

emit() writes one notifications row, then pushes {type, message} to every
open realtime subscriber. The write is durable; the pushes are best-effort.
A failed insert aborts the emit (nothing is pushed) and is logged.
"""

from __future__ import annotations

import json
import logging

from sqlalchemy import select

from ..models import Notification, NOTIFICATION_TYPES
from ..validation import StorageError, ValidationError
from paytrack.time_utils import utcnow
from .realtime import SubscriberRegistry
from .storage import Storage


logger = logging.getLogger(__name__)


class NotificationEmitter:
    def __init__(self, storage: Storage, registry: SubscriberRegistry):
        self.storage = storage
        self.registry = registry

    def emit(self, type: str, message: str) -> Notification | None:
        """
        Persist and broadcast one notification.

        Returns the stored Notification, or None when the insert failed.
        """
        if type not in NOTIFICATION_TYPES:
            raise ValidationError(f"Unknown notification type: {type}")

        notification = Notification(type=type, message=message, created_at=utcnow())
        try:
            with self.storage.transaction() as session:
                session.add(notification)
        except StorageError:
            logger.exception("Notification insert failed (type=%s)", type)
            return None

        payload = json.dumps(notification.payload())
        delivered = self.registry.broadcast(payload)
        logger.debug("Notification %s pushed to %d subscriber(s)", notification.id, delivered)
        return notification


def list_notifications(storage: Storage, limit: int | None = None) -> list[Notification]:
    """Newest first."""
    stmt = select(Notification).order_by(Notification.created_at.desc(), Notification.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    return storage.scalars(stmt)
