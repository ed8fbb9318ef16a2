from fastapi import APIRouter, Depends

from articlehub.dependencies import articles_query, get_article_service, get_current_user
from articlehub.models import User
from articlehub.schemas import (
    ArticleCreate,
    ArticleListResponse,
    ArticleResponse,
    ArticlesQuery,
    ArticleUpdate,
)
from articlehub.services.article_service import ArticleService

router = APIRouter(prefix="/articles", tags=["articles"])

@router.get("", response_model=ArticleListResponse)
async def list_articles(
    query: ArticlesQuery = Depends(articles_query),
    service: ArticleService = Depends(get_article_service),
):
    return await service.find_all(query)

@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(article_id: int, service: ArticleService = Depends(get_article_service)):
    return await service.find_one(article_id)

# PUT is the historical create route; POST is accepted as well.
@router.put("", status_code=201, response_model=ArticleResponse)
@router.post("", status_code=201, response_model=ArticleResponse)
async def create_article(
    data: ArticleCreate,
    user: User = Depends(get_current_user),
    service: ArticleService = Depends(get_article_service),
):
    return await service.create(data, user)

@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: int,
    data: ArticleUpdate,
    user: User = Depends(get_current_user),
    service: ArticleService = Depends(get_article_service),
):
    return await service.update(article_id, data, user)

@router.delete("/{article_id}", status_code=204)
async def delete_article(
    article_id: int,
    user: User = Depends(get_current_user),
    service: ArticleService = Depends(get_article_service),
):
    await service.remove(article_id, user)
