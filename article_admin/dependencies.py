from typing import Any

from fastapi import Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from article_admin.config import settings
from article_admin.database import get_db
from article_admin.errors import detail_from_validation_error
from article_admin.models import Article
from article_admin.repositories import article as article_repository
from article_admin.schemas import ArticleFilterDto


def get_article_filter(
    page: str | None = Query(None, description="Page number (1-based)."),
    limit: str | None = Query(
        None,
        description=f"Number of articles per page (default {settings.DEFAULT_PAGE_SIZE}, "
        f"max {settings.MAX_PAGE_SIZE}).",
    ),
) -> ArticleFilterDto:
    """
    Bind the list query string to an :class:`ArticleFilterDto`.

    The raw strings are handed to the DTO so that every invalid value,
    non-numeric ones included, is answered with 404 and a
    ``"<field>: <message>"`` detail, e.g.
    ``"limit: This value should be positive."``; they never reach the
    repository.
    """
    raw: dict[str, Any] = {"page": page, "limit": limit}
    try:
        return ArticleFilterDto(**{k: v for k, v in raw.items() if v is not None})
    except ValidationError as exc:
        raise HTTPException(status_code=404, detail=detail_from_validation_error(exc))


async def get_article_or_404(article_id: int, db: AsyncSession = Depends(get_db)) -> Article:
    """Resolve the ``{article_id}`` path segment to an Article."""
    article = await article_repository.find(db, article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article
