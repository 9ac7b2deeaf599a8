"""Account aggregates."""

from warden_identity.domain.account.aggregates.account import Account

__all__ = ["Account"]
