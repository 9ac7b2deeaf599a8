"""SQLAlchemy implementation of AccountRepository."""

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from warden_identity.domain.account import (
    Account,
    AccountRepository,
    DuplicateAccountError,
    Email,
)
from warden_identity.domain.shared import ensure_tz_aware
from warden_identity.infrastructure.persistence.sqlalchemy.models import AccountModel

logger = logging.getLogger(__name__)


class AccountRepositorySQLAlchemy(AccountRepository):
    """SQLAlchemy implementation of the AccountRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, account_id: UUID) -> Account | None:
        model = await self._find_model_by_id(account_id)
        if model is None:
            return None
        return self._map_to_domain(model)

    async def find_by_email(self, email: Union[str, Email]) -> Account | None:
        # Lookups never raise on malformed input; they simply miss
        if isinstance(email, Email):
            email_value = email.value
        elif email:
            email_value = email.strip().lower()
        else:
            return None

        stmt = select(AccountModel).where(AccountModel.email == email_value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_display_name(self, display_name: str) -> Account | None:
        stmt = select(AccountModel).where(AccountModel.display_name == display_name)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def save(self, account: Account) -> None:
        existing = await self._find_model_by_id(account.id)

        try:
            if existing:
                self._update_model(existing, account)
                logger.debug("Updated account: %s", account.id)
            else:
                self._session.add(self._map_to_model(account))
                logger.debug(
                    "Created account: %s (email: %s)",
                    account.id,
                    account.email,
                )

            await self._session.flush()
        except IntegrityError as e:
            if "UNIQUE constraint failed" in str(e) or "unique" in str(e).lower():
                raise DuplicateAccountError(account.email) from e
            raise

    async def delete(self, account_id: UUID) -> None:
        model = await self._find_model_by_id(account_id)

        if model:
            await self._session.delete(model)
            await self._session.flush()
            logger.debug("Deleted account: %s", account_id)

    async def _find_model_by_id(self, account_id: UUID) -> AccountModel | None:
        stmt = select(AccountModel).where(AccountModel.id == account_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: AccountModel) -> Account:
        return Account.reconstitute(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            password_hash=model.password_hash,
            enabled=model.enabled,
            verification_code=model.verification_code,
            verification_code_expires_at=model.verification_code_expires_at,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, account: Account) -> AccountModel:
        return AccountModel(
            id=account.id,
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
            display_name=account.display_name,
            password_hash=account.password_hash,
            enabled=account.enabled,
            verification_code=account.verification_code,
            verification_code_expires_at=account.verification_code_expires_at,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

    def _update_model(self, model: AccountModel, account: Account) -> None:
        model.email = account.email
        model.first_name = account.first_name
        model.last_name = account.last_name
        model.display_name = account.display_name
        model.password_hash = account.password_hash
        model.enabled = account.enabled
        model.verification_code = account.verification_code
        model.verification_code_expires_at = account.verification_code_expires_at
        model.updated_at = account.updated_at
