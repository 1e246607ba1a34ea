from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from article_admin.database import get_db
from article_admin.dependencies import get_article_filter, get_article_or_404
from article_admin.mappers.article import map_article
from article_admin.models import Article
from article_admin.repositories import article as article_repository
from article_admin.schemas import (
    ArticleFilterDto,
    ArticlePage,
    ArticleShow,
    CreateArticleDto,
    CreatedResponse,
    UpdateArticleDto,
)
from article_admin.security import Action, require

router = APIRouter(prefix="/api/admin/articles", tags=["admin: articles"])


@router.get("", response_model=ArticlePage, dependencies=[Depends(require(Action.ARTICLE_LIST))])
async def list_articles(
    filters: ArticleFilterDto = Depends(get_article_filter),
    db: AsyncSession = Depends(get_db),
):
    return await article_repository.find_paginate(db, filters)


@router.post(
    "",
    status_code=201,
    response_model=CreatedResponse,
    dependencies=[Depends(require(Action.ARTICLE_CREATE))],
)
async def create_article(data: CreateArticleDto, db: AsyncSession = Depends(get_db)):
    article = await map_article(db, data)
    await article_repository.save(db, article)
    return CreatedResponse(id=article.id)


@router.patch(
    "/{article_id}",
    response_model=ArticleShow,
    dependencies=[Depends(require(Action.ARTICLE_UPDATE))],
)
async def update_article(
    data: UpdateArticleDto,
    article: Article = Depends(get_article_or_404),
    db: AsyncSession = Depends(get_db),
):
    await map_article(db, data, article)
    await article_repository.save(db, article)
    return ArticleShow.model_validate(article)


@router.delete(
    "/{article_id}",
    status_code=204,
    response_class=Response,
    dependencies=[Depends(require(Action.ARTICLE_DELETE))],
)
async def delete_article(
    article: Article = Depends(get_article_or_404),
    db: AsyncSession = Depends(get_db),
):
    await article_repository.remove(db, article)
    return Response(status_code=204)
