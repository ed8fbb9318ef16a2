from datetime import datetime

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.cache import CacheBackend
from articlehub.config import settings
from articlehub.database import get_db
from articlehub.exceptions import UnauthorizedError
from articlehub.models import User
from articlehub.repositories.article_repository import ArticleRepository
from articlehub.schemas import ArticlesQuery
from articlehub.security import decode_access_token
from articlehub.services import auth_service
from articlehub.services.article_service import ArticleService

bearer_scheme = HTTPBearer(auto_error=False)


def articles_query(
    page: int = Query(1, ge=1, description="Page number (1-based)."),
    limit: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        description="Number of articles returned per page.",
    ),
    search: str | None = Query(
        None,
        description="Substring to search for in titles and descriptions.",
    ),
    author_id: int | None = Query(None, alias="authorId", ge=1, description="Author ID."),
    is_published: bool | None = Query(
        None,
        alias="isPublished",
        description="Published (1/true) or draft (0/false) articles only.",
    ),
    start_date: datetime | None = Query(
        None,
        alias="startDate",
        description="Only articles created at or after this date.",
    ),
    end_date: datetime | None = Query(
        None,
        alias="endDate",
        description="Only articles created at or before this date.",
    ),
) -> ArticlesQuery:
    """
    Parse the list query string into an ``ArticlesQuery``.

    Parameters that were not supplied stay ``None`` so they are left out
    of the list cache signature.
    """
    return ArticlesQuery(
        page=page,
        limit=limit,
        search=search,
        author_id=author_id,
        is_published=is_published,
        start_date=start_date,
        end_date=end_date,
    )


def get_cache(request: Request) -> CacheBackend:
    """Return the cache handle created by the application lifespan."""
    return request.app.state.cache


def get_article_service(
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
) -> ArticleService:
    return ArticleService(ArticleRepository(db), cache)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to the calling user, or fail with 401."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise UnauthorizedError("Invalid token") from exc

    user = await auth_service.get_user_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError("Unauthorized")
    return user
