"""
Account state lookup for authenticated requests

A token stays cryptographically valid after its account is deactivated or
deleted, so every request re-reads the account's active flag.
"""

from typing import Protocol
import uuid

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.models.user import User


class UserStore(Protocol):
    async def is_active_user(self, user_id: str) -> bool:
        """True only when the account exists and is active"""
        ...


class SQLUserStore:
    """Reads the account's active flag, one query per call"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def is_active_user(self, user_id: str) -> bool:
        try:
            user_uuid = uuid.UUID(str(user_id))
        except ValueError:
            return False

        result = await self.session.exec(select(User.is_active).where(User.id == user_uuid))
        return bool(result.first())
