"""Application services for the identity lifecycle."""

from warden_identity.application.services.notification_dispatcher import (
    NotificationDispatcher,
    flush_pending_notifications,
    schedule_in_background,
)
from warden_identity.application.services.password_reset_service import (
    PasswordResetService,
)
from warden_identity.application.services.identity_service import (
    IdentityService,
    TokenPair,
)

__all__ = [
    "IdentityService",
    "NotificationDispatcher",
    "PasswordResetService",
    "TokenPair",
    "flush_pending_notifications",
    "schedule_in_background",
]
