"""
Ownership and publication rules applied before an article is mutated.

Two checks run, always in this order:

1. the article must exist (``NotFoundError``),
2. the caller must be its author (``ForbiddenError``).

Publication is a two-state machine driven by ``is_published``:
``Draft -> Published`` stamps ``published_at`` with the current time
(every time it happens, so a republish refreshes the stamp);
``Published -> Draft`` keeps the old stamp.  Nothing else writes
``published_at``.
"""
from datetime import datetime, timezone

from articlehub.exceptions import ForbiddenError, NotFoundError
from articlehub.models import Article, User
from articlehub.repositories.article_repository import ArticleRepository


async def load_owned_article(
    repository: ArticleRepository,
    article_id: int,
    user: User,
    action: str = "update",
) -> Article:
    """Return the article if it exists and *user* owns it."""
    existing = await repository.find_one_by_id(article_id)
    if existing is None:
        raise NotFoundError(f"Article with ID {article_id} not found")
    if existing.author_id != user.id:
        raise ForbiddenError(f"You can only {action} your own articles")
    return existing


def initial_publication(is_published: bool, now: datetime | None = None) -> datetime | None:
    """Publication timestamp for a new article."""
    if not is_published:
        return None
    return now or datetime.now(timezone.utc)


def apply_publish_transition(
    existing: Article,
    changes: dict,
    now: datetime | None = None,
) -> dict:
    """
    Return *changes* with ``published_at`` added when they publish a draft.

    The input dict is not modified.
    """
    changes = dict(changes)
    changes.pop("published_at", None)
    if changes.get("is_published") and not existing.is_published:
        changes["published_at"] = now or datetime.now(timezone.utc)
    return changes
