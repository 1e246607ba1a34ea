from sqlalchemy.ext.asyncio import AsyncSession

from article_admin.errors import UnknownReferenceError
from article_admin.models import Article, User
from article_admin.repositories import user as user_repository
from article_admin.schemas import CreateArticleDto, UpdateArticleDto


async def _resolve_user(db: AsyncSession, user_id: int) -> User:
    user = await user_repository.find(db, user_id)
    if user is None:
        raise UnknownReferenceError("user", user_id)
    return user


async def map_article(
    db: AsyncSession,
    dto: CreateArticleDto | UpdateArticleDto,
    existing: Article | None = None,
) -> Article:
    """
    Build a new Article from a create DTO, or apply an update DTO onto
    *existing*.

    Updates only touch the fields the client sent; everything else on the
    entity is left as it was.
    """
    if existing is None:
        return Article(
            title=dto.title,
            content=dto.content,
            short_content=dto.short_content,
            user=await _resolve_user(db, dto.user),
        )

    for field, value in dto.provided().items():
        if field == "user":
            existing.user = await _resolve_user(db, value)
        else:
            setattr(existing, field, value)
    return existing
