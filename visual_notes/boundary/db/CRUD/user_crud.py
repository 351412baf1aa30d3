"""
User CRUD operations.

Lookup by token hash for authentication and a row lock used to
serialize quota reservations per caller.

Dependencies: sqlalchemy, visual_notes.boundary.db.models
System role: Caller identity queries
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from visual_notes.boundary.db.CRUD.base_crud import BaseCRUD
from visual_notes.boundary.db.models.user_model import UserModel


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel."""

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_by_token_hash(
        self,
        session: AsyncSession,
        token_hash: str,
    ) -> UserModel | None:
        """
        Resolve a caller from the SHA-256 digest of their bearer token.

        Args:
            session: Async database session
            token_hash: Hex digest of the presented token

        Returns:
            UserModel if a matching account exists, None otherwise
        """
        stmt = select(UserModel).where(UserModel.api_token_hash == token_hash)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_for_update(self, session: AsyncSession, id: UUID) -> UserModel | None:
        """
        Load a user row with SELECT ... FOR UPDATE.

        Concurrent reservations for the same caller queue on this lock
        until the holding transaction commits.
        """
        stmt = select(UserModel).where(UserModel.id == id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


user_crud = UserCRUD()
