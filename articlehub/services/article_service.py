"""
Article service: cache-aside reads and invalidating writes for Article.

Design notes
------------
- Reads are explicit two-branch functions: try the cache, otherwise load
  from the repository, map, and populate the cache.  A cache failure and a
  store failure therefore surface as different errors.
- Keys: ``article:<id>`` for one article and ``article:list:<signature>``
  for one list query.  The signature is the compact JSON of the query
  fields that are present, in declaration order, so identical logical
  queries share one key.
- Every write deletes all ``article:list:`` keys; update and delete also
  drop the article's own key.  List payloads embed full article data, so
  both families go stale together.  The cache cannot delete by pattern, so
  invalidation enumerates every live key and filters by prefix.
- Writes commit before invalidating.  A read that lands between the two
  sees the committed row, so it cannot put the pre-write state back.
- Invalidation is best-effort: the single key and the list family are
  attempted independently, a cache failure on either is logged, and the
  write still succeeds (staleness is bounded by the TTL).
"""
import json
import logging

from articlehub.cache import CacheBackend
from articlehub.config import settings
from articlehub.exceptions import CacheUnavailableError, NotFoundError
from articlehub.models import User
from articlehub.repositories.article_repository import ArticleRepository
from articlehub.schemas import ArticleCreate, ArticlesQuery, ArticleUpdate
from articlehub.serializers import article_to_response
from articlehub.services import article_guard

logger = logging.getLogger(__name__)

CACHE_PREFIX = "article"
LIST_CACHE_PREFIX = f"{CACHE_PREFIX}:list:"


def article_cache_key(article_id: int) -> str:
    return f"{CACHE_PREFIX}:{article_id}"


def list_signature(query: ArticlesQuery) -> str:
    """Deterministic string encoding of a list query."""
    fields = query.model_dump(by_alias=True, exclude_none=True, mode="json")
    return json.dumps(fields, separators=(",", ":"))


def list_cache_key(query: ArticlesQuery) -> str:
    return f"{LIST_CACHE_PREFIX}{list_signature(query)}"


class ArticleService:
    def __init__(
        self,
        repository: ArticleRepository,
        cache: CacheBackend,
        ttl: int = settings.CACHE_TTL,
    ) -> None:
        self.repository = repository
        self.cache = cache
        self.ttl = ttl

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_all(self, query: ArticlesQuery) -> dict:
        """Return ``{"articles": [...], "total": n}`` for *query*."""
        cache_key = list_cache_key(query)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit %s", cache_key)
            return json.loads(cached)

        articles, total = await self.repository.find_with_pagination(query)
        result = {
            "articles": [article_to_response(a) for a in articles],
            "total": total,
        }
        await self.cache.set(cache_key, json.dumps(result), self.ttl)
        return result

    async def find_one(self, article_id: int) -> dict:
        cache_key = article_cache_key(article_id)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit %s", cache_key)
            return json.loads(cached)

        article = await self.repository.find_one_by_id(article_id)
        if article is None:
            raise NotFoundError(f"Article with ID {article_id} not found")

        result = article_to_response(article)
        await self.cache.set(cache_key, json.dumps(result), self.ttl)
        return result

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, data: ArticleCreate, user: User) -> dict:
        values = data.model_dump()
        values["author_id"] = user.id
        values["published_at"] = article_guard.initial_publication(data.is_published)

        article = await self.repository.create(values)
        await self.repository.commit()
        logger.info("Article %s created by user %s", article.id, user.id)

        await self._invalidate()
        return article_to_response(article, user)

    async def update(self, article_id: int, data: ArticleUpdate, user: User) -> dict:
        existing = await article_guard.load_owned_article(
            self.repository, article_id, user, action="update"
        )
        changes = article_guard.apply_publish_transition(
            existing, data.model_dump(exclude_unset=True)
        )

        article = await self.repository.update(article_id, changes)
        if article is None:
            raise NotFoundError(f"Article with ID {article_id} not found")
        await self.repository.commit()
        logger.info("Article %s updated by user %s", article_id, user.id)

        await self._invalidate(article_id)
        return article_to_response(article)

    async def remove(self, article_id: int, user: User) -> None:
        await article_guard.load_owned_article(
            self.repository, article_id, user, action="delete"
        )
        await self.repository.delete(article_id)
        await self.repository.commit()
        logger.info("Article %s deleted by user %s", article_id, user.id)

        await self._invalidate(article_id)

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    async def _invalidate(self, article_id: int | None = None) -> None:
        if article_id is not None:
            try:
                await self.cache.delete(article_cache_key(article_id))
            except CacheUnavailableError as exc:
                logger.warning(
                    "Cache invalidation failed after article write (key=%s): %s",
                    article_cache_key(article_id),
                    exc,
                )
        try:
            await self.invalidate_list_cache()
        except CacheUnavailableError as exc:
            logger.warning(
                "Cache invalidation failed after article write (key=%s*): %s",
                LIST_CACHE_PREFIX,
                exc,
            )

    async def invalidate_list_cache(self) -> int:
        """Delete every list-cache entry; return how many were removed."""
        keys = [k for k in await self.cache.keys() if k.startswith(LIST_CACHE_PREFIX)]
        for key in keys:
            await self.cache.delete(key)
        if keys:
            logger.debug("Cache invalidated %d list key(s)", len(keys))
        return len(keys)
