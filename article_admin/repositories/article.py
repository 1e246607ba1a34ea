"""
Article repository — reads and writes for the Article entity.

Design notes
------------
- Pages are ordered by ``Article.id`` ascending, so page boundaries are
  reproducible: with a limit of 6 the 7th inserted article always opens
  page 2.
- List pages go through the cache-aside pattern (Redis, then the DB);
  every write invalidates all cached pages.
- The author is eager-loaded with ``joinedload``; relationships are
  ``lazy="noload"`` so nothing is fetched implicitly.
- ``save``/``remove`` flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency.  Persistence errors propagate.
"""
import logging
import math

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from article_admin.cache import cache
from article_admin.models import Article
from article_admin.schemas import ArticleFilterDto, ArticlePage, ArticleShow, PageMeta

logger = logging.getLogger(__name__)


async def count(db: AsyncSession) -> int:
    return (await db.execute(select(func.count()).select_from(Article))).scalar_one()


async def find_paginate(db: AsyncSession, filters: ArticleFilterDto) -> ArticlePage:
    """
    Return one page of articles and the page metadata.

    Two SQL statements are issued on a cache miss:
    1. COUNT of all articles.
    2. SELECT with OFFSET/LIMIT and the author JOIN.
    """
    cached = await cache.get_page(filters.page, filters.limit)
    if cached:
        return ArticlePage.model_validate(cached)

    total = await count(db)

    q = (
        select(Article)
        .options(joinedload(Article.user))
        .order_by(Article.id.asc())
        .offset(filters.offset)
        .limit(filters.limit)
    )
    result = await db.execute(q)
    articles = result.unique().scalars().all()

    page = ArticlePage(
        items=[ArticleShow.model_validate(a) for a in articles],
        meta=PageMeta(
            total=total,
            pages=math.ceil(total / filters.limit) if total > 0 else 0,
        ),
    )
    await cache.set_page(filters.page, filters.limit, page.model_dump(mode="json"))
    return page


async def find(db: AsyncSession, article_id: int) -> Article | None:
    """Return the article with its author loaded, or None."""
    q = (
        select(Article)
        .where(Article.id == article_id)
        .options(joinedload(Article.user))
    )
    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def find_one_by(db: AsyncSession, **criteria) -> Article | None:
    """
    Return the first article (lowest id) matching every ``column=value``
    pair in *criteria*, e.g. ``find_one_by(db, title="Article 1")``.
    """
    q = select(Article).options(joinedload(Article.user)).filter_by(**criteria).order_by(Article.id).limit(1)
    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def save(db: AsyncSession, article: Article) -> Article:
    """Persist a new or modified article and purge cached list pages."""
    db.add(article)
    await db.flush()
    await cache.invalidate()
    logger.info("Article %s saved", article.id)
    return article


async def remove(db: AsyncSession, article: Article) -> None:
    """Hard-delete *article* and purge cached list pages."""
    article_id = article.id
    await db.delete(article)
    await db.flush()
    await cache.invalidate()
    logger.info("Article %s deleted", article_id)
