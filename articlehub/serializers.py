"""
Presentation mapping from ORM rows to response dicts.

Output dicts use the wire (camelCase) field names and contain only
JSON-native values, so a payload served from the cache is identical to
the one produced on a miss.  Credentials never leave this module: the
user's ``password_hash`` is not part of any shape built here.
"""
from datetime import datetime

from articlehub.models import Article, User


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def user_to_summary(user: User) -> dict:
    """Serialise a User to the ``{id, email, firstName, lastName}`` shape."""
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


def _author_summary(article: Article, author: User | None) -> dict:
    # An explicit acting user wins: a freshly inserted row has no loaded author.
    source = author if author is not None else article.author
    if source is None:
        return {"id": article.author_id, "firstName": None, "lastName": None, "email": None}
    return {
        "id": source.id,
        "firstName": source.first_name,
        "lastName": source.last_name,
        "email": source.email,
    }


def article_to_response(article: Article, author: User | None = None) -> dict:
    """Serialise an Article ORM instance to its response dict."""
    return {
        "id": article.id,
        "title": article.title,
        "description": article.description,
        "content": article.content,
        "isPublished": article.is_published,
        "createdAt": _iso(article.created_at),
        "updatedAt": _iso(article.updated_at),
        "publishedAt": _iso(article.published_at),
        "author": _author_summary(article, author),
    }
