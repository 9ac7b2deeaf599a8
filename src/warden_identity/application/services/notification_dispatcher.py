"""Fire-and-forget delivery of account notifications.

Use cases never wait for, or fail because of, message delivery. Each
delivery is wrapped in a job that logs any exception, and the job is handed
to a scheduler.

The HTTP layer always passes FastAPI's ``BackgroundTasks.add_task``, so
Starlette runs the job after the response is sent. The default scheduler
is for callers outside a request (scripts, workers): it runs the blocking
notifier call in a worker thread from a background asyncio task, and such
callers await ``flush_pending_notifications()`` before their loop closes.
"""

import asyncio
import logging
from datetime import timedelta
from functools import partial
from typing import Callable, Set

from warden_identity.application.ports import Notifier

logger = logging.getLogger(__name__)

Job = Callable[[], None]
Scheduler = Callable[[Job], None]

# Store references to fire-and-forget tasks to prevent garbage collection
_background_tasks: Set[asyncio.Task] = set()


def schedule_in_background(job: Job) -> None:
    """Run ``job`` in a worker thread without awaiting it."""
    task = asyncio.get_running_loop().create_task(asyncio.to_thread(job))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


async def flush_pending_notifications() -> None:
    """Wait for all background deliveries started so far."""
    if _background_tasks:
        await asyncio.gather(*list(_background_tasks), return_exceptions=True)


class NotificationDispatcher:
    """Schedules notifier calls so that delivery errors never reach callers."""

    def __init__(self, notifier: Notifier, scheduler: Scheduler | None = None):
        self._notifier = notifier
        self._schedule = scheduler or schedule_in_background

    def verification_code(
        self,
        to_email: str,
        code: str,
        valid_for: timedelta,
    ) -> None:
        self._dispatch(
            "verification code",
            to_email,
            partial(self._notifier.send_verification_code, to_email, code, valid_for),
        )

    def password_reset_link(self, to_email: str, reset_link: str) -> None:
        self._dispatch(
            "password reset link",
            to_email,
            partial(self._notifier.send_password_reset_link, to_email, reset_link),
        )

    def _dispatch(self, kind: str, to_email: str, send: Job) -> None:
        def job() -> None:
            try:
                send()
                logger.debug("Sent %s to %s", kind, to_email)
            except Exception as e:
                logger.error("Failed to send %s to %s: %s", kind, to_email, e)

        try:
            self._schedule(job)
        except Exception as e:
            logger.error("Could not schedule %s for %s: %s", kind, to_email, e)
