"""
Notification Service - records the intent to notify, never delivers.

Drive alerts and password resets would go out through an email/SMS
provider in a real deployment. Here every request becomes a stored
NotificationIntent plus a log line, which is enough for the TPO screens
and for tests to assert on.
"""

from typing import Any, Dict, List, Optional, Union

from loguru import logger

from placement_portal.db.repositories import Store
from placement_portal.models.entities import NotificationIntent, NotificationKind
from placement_portal.utils.timestamp import utcnow

RESET_REQUEST_MESSAGE = "If an account with that email exists, a reset link will be sent."
RESET_NOT_IMPLEMENTED_MESSAGE = "Password reset flow not yet implemented in this demo."


class NotificationService:

    def __init__(self, store: Store):
        self.store = store

    def record(
        self,
        kind: NotificationKind,
        recipients: List[Union[int, str]],
        subject: str,
        payload: Optional[Dict[str, Any]] = None,
        created_by: Optional[int] = None,
    ) -> NotificationIntent:
        intent = self.store.notifications.add(NotificationIntent(
            kind=kind,
            recipients=list(recipients),
            subject=subject,
            payload=payload or {},
            created_by=created_by,
            created_at=utcnow(),
        ))
        logger.info(f"[Notification] {kind.value} '{subject}' queued for {len(intent.recipients)} recipient(s)")
        return intent

    def request_password_reset(self, email: str) -> str:
        """
        Record a reset intent if the account exists.
        The answer is the same either way, so it does not reveal accounts.
        """
        user = self.store.users.get_by_email(email)
        if user is not None:
            self.record(
                NotificationKind.password_reset,
                recipients=[user.email],
                subject="Password reset requested",
                payload={"userId": user.id},
            )
        return RESET_REQUEST_MESSAGE

    def reset_password(self, token: str, new_password: str) -> str:
        logger.debug("Password reset attempted; flow is a stub")
        return RESET_NOT_IMPLEMENTED_MESSAGE
