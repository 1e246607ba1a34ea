"""User lookups used by the mapper, the login endpoint and auth resolution."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from article_admin.models import User


async def find(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def find_one_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()
