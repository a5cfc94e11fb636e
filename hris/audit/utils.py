from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


def log_action(
    action: str,
    *,
    actor: object | None = None,
    message: str = "",
    model_name: str = "",
    record_id: int | None = None,
    payload: dict | None = None,
) -> None:
    user_model = get_user_model()
    actor_user = actor if isinstance(actor, user_model) else None
    AuditLog.objects.create(
        action=action,
        actor=actor_user,
        message=message,
        model_name=model_name,
        record_id=record_id,
        payload=payload,
    )


def log_action_on_commit(action: str, **kwargs) -> None:
    """Queue `log_action` for after the surrounding transaction commits.

    Delivery is best effort: a failing audit write is logged and dropped so it
    never undoes the attendance change that triggered it.
    """

    def _deliver():
        try:
            log_action(action, **kwargs)
        except Exception:  # noqa: BLE001 - audit delivery is fire-and-forget
            logger.exception("Audit delivery failed for %s", action)

    transaction.on_commit(_deliver)
