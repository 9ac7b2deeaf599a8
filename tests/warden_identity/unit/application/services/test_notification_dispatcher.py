"""Unit tests for NotificationDispatcher."""

import asyncio
import logging
from datetime import timedelta
from unittest.mock import Mock

import pytest

from tests.shared.fixtures.fakes import (
    FailingNotifier,
    RecordingNotifier,
    run_immediately,
)
from warden_identity import Notifier, NotificationDispatcher, flush_pending_notifications

CODE_WINDOW = timedelta(minutes=15)


class TestNotificationDispatcher:
    def test_delivers_verification_code(self):
        notifier = RecordingNotifier()
        dispatcher = NotificationDispatcher(notifier, scheduler=run_immediately)

        dispatcher.verification_code("ada@example.com", "123456", CODE_WINDOW)

        assert notifier.verification_codes == [("ada@example.com", "123456")]

    def test_delivers_reset_link(self):
        notifier = RecordingNotifier()
        dispatcher = NotificationDispatcher(notifier, scheduler=run_immediately)

        dispatcher.password_reset_link("ada@example.com", "https://x/reset?token=t")

        assert notifier.reset_links == [("ada@example.com", "https://x/reset?token=t")]

    def test_delivery_failure_is_logged_not_raised(self, caplog):
        dispatcher = NotificationDispatcher(FailingNotifier(), scheduler=run_immediately)

        with caplog.at_level(logging.ERROR):
            dispatcher.verification_code("ada@example.com", "123456", CODE_WINDOW)

        assert "Failed to send verification code to ada@example.com" in caplog.text

    def test_scheduler_failure_is_logged_not_raised(self, caplog):
        def broken_scheduler(job):
            raise RuntimeError("queue full")

        notifier = Mock(spec=Notifier)
        dispatcher = NotificationDispatcher(notifier, scheduler=broken_scheduler)

        with caplog.at_level(logging.ERROR):
            dispatcher.password_reset_link("ada@example.com", "link")

        notifier.send_password_reset_link.assert_not_called()
        assert "Could not schedule password reset link" in caplog.text

    def test_scheduler_receives_a_deferred_job(self):
        jobs = []
        notifier = RecordingNotifier()
        dispatcher = NotificationDispatcher(notifier, scheduler=jobs.append)

        dispatcher.verification_code("ada@example.com", "123456", CODE_WINDOW)

        assert notifier.verification_codes == []
        jobs[0]()
        assert notifier.verification_codes == [("ada@example.com", "123456")]


class TestBackgroundScheduling:
    @pytest.mark.asyncio
    async def test_default_scheduler_runs_in_background(self):
        notifier = RecordingNotifier()
        dispatcher = NotificationDispatcher(notifier)

        dispatcher.verification_code("ada@example.com", "123456", CODE_WINDOW)
        await flush_pending_notifications()

        assert notifier.verification_codes == [("ada@example.com", "123456")]

    @pytest.mark.asyncio
    async def test_slow_delivery_does_not_block_caller(self):
        started = asyncio.Event()
        loop = asyncio.get_running_loop()

        class SlowNotifier(RecordingNotifier):
            def send_verification_code(self, to_email, code, valid_for):
                loop.call_soon_threadsafe(started.set)
                super().send_verification_code(to_email, code, valid_for)

        notifier = SlowNotifier()
        dispatcher = NotificationDispatcher(notifier)

        dispatcher.verification_code("ada@example.com", "123456", CODE_WINDOW)
        assert notifier.verification_codes == []

        await asyncio.wait_for(started.wait(), timeout=5)
        await flush_pending_notifications()
        assert len(notifier.verification_codes) == 1

    @pytest.mark.asyncio
    async def test_background_failure_is_contained(self, caplog):
        dispatcher = NotificationDispatcher(FailingNotifier())

        with caplog.at_level(logging.ERROR):
            dispatcher.password_reset_link("ada@example.com", "link")
            await flush_pending_notifications()

        assert "Failed to send password reset link" in caplog.text
