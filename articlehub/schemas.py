import re
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from articlehub.config import settings

# Field names travel as camelCase on the wire (``isPublished``, ``firstName``)
# while the Python side stays snake_case.
_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)

_EMAIL_RE = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_PASSWORD_RE = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


# --- Auth ---

class RegisterRequest(BaseModel):
    model_config = _CAMEL

    email: str = Field(max_length=255, pattern=_EMAIL_RE)
    first_name: str = Field(min_length=2, max_length=150)
    last_name: str = Field(min_length=2, max_length=150)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not _PASSWORD_RE.match(value):
            raise ValueError(
                "Password must contain at least one lowercase letter, "
                "one uppercase letter, and one number"
            )
        return value


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str


class UserSummary(BaseModel):
    model_config = _CAMEL

    id: int
    email: str
    first_name: str
    last_name: str


class AuthResponse(BaseModel):
    model_config = _CAMEL

    access_token: str
    user: UserSummary


# --- Article ---

class ArticleCreate(BaseModel):
    model_config = _CAMEL

    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)
    content: str = Field(min_length=1)
    is_published: bool = False


class ArticleUpdate(BaseModel):
    model_config = _CAMEL

    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = Field(None, min_length=1)
    content: str | None = None
    is_published: bool | None = None

    @field_validator("title", "description", "is_published")
    @classmethod
    def not_null(cls, value):
        # Omitting these is fine; sending an explicit null is not.
        if value is None:
            raise ValueError("must not be null")
        return value


class ArticlesQuery(BaseModel):
    """
    Filter / pagination descriptor for the article list.

    Field order matters: it fixes the order of keys in the list cache
    signature, so the same logical query always maps to the same key.
    """

    model_config = _CAMEL

    page: int = Field(1, ge=1)
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1)
    search: str | None = None
    author_id: int | None = Field(None, ge=1)
    is_published: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("search")
    @classmethod
    def blank_search_is_absent(cls, value: str | None) -> str | None:
        # An empty search filters nothing, so it must not change the cache key.
        return value or None

    @field_validator("start_date", "end_date")
    @classmethod
    def as_utc(cls, value: datetime | None) -> datetime | None:
        """Express dates in UTC; a date without an offset is taken as UTC."""
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def offset(self) -> int:
        """SQL OFFSET value computed from the current page and limit."""
        return (self.page - 1) * self.limit


class AuthorSummary(BaseModel):
    model_config = _CAMEL

    id: int | None
    first_name: str | None
    last_name: str | None
    email: str | None


class ArticleResponse(BaseModel):
    model_config = _CAMEL

    id: int
    title: str
    description: str
    content: str | None
    is_published: bool
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None
    author: AuthorSummary


class ArticleListResponse(BaseModel):
    articles: list[ArticleResponse]
    total: int
