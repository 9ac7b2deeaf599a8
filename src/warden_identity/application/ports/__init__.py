"""Ports (interfaces) the application layer depends on."""

from warden_identity.application.ports.notifier import Notifier

__all__ = ["Notifier"]
