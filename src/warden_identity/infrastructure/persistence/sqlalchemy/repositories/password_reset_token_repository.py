"""SQLAlchemy implementation of PasswordResetTokenRepository."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from warden_identity.domain.password_reset import (
    PasswordResetTokenData,
    PasswordResetTokenRepository,
)
from warden_identity.domain.shared import ensure_tz_aware
from warden_identity.infrastructure.persistence.sqlalchemy.models import (
    PasswordResetTokenModel,
)


class PasswordResetTokenRepositorySQLAlchemy(PasswordResetTokenRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        account_id: UUID,
        token_hash: str,
        expires_at: datetime,
    ) -> UUID:
        token_id = uuid4()
        model = PasswordResetTokenModel(
            id=token_id,
            account_id=account_id,
            token_hash=token_hash,
            expires_at=expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return token_id

    async def find_by_hash(self, token_hash: str) -> PasswordResetTokenData | None:
        stmt = select(PasswordResetTokenModel).where(
            PasswordResetTokenModel.token_hash == token_hash,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        # SQLite hands back naive datetimes
        return PasswordResetTokenData(
            id=model.id,
            account_id=model.account_id,
            token_hash=model.token_hash,
            expires_at=ensure_tz_aware(model.expires_at),
            created_at=ensure_tz_aware(model.created_at),
        )

    async def delete(self, token_id: UUID) -> None:
        stmt = delete(PasswordResetTokenModel).where(
            PasswordResetTokenModel.id == token_id,
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def delete_all_for_account(self, account_id: UUID) -> int:
        stmt = delete(PasswordResetTokenModel).where(
            PasswordResetTokenModel.account_id == account_id,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore
