from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from article_admin.config import settings

# Field names are snake_case in Python and camelCase on the wire; both
# spellings are accepted on input.
_INPUT_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")
_OUTPUT_CONFIG = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


# --- Filter ---

# OFFSET is bound as a signed 64-bit integer; pages past this one would
# overflow it even at the largest allowed limit.
MAX_PAGE = (2**63 - 1) // settings.MAX_PAGE_SIZE + 1


def _at_most(value: int, maximum: int) -> int:
    if value > maximum:
        raise PydanticCustomError(
            "less_than_or_equal",
            "This value should be less than or equal to {max}.",
            {"max": maximum},
        )
    return value


class ArticleFilterDto(BaseModel):
    """Query parameters of the admin article list."""

    page: int = 1
    limit: int = settings.DEFAULT_PAGE_SIZE

    @field_validator("page", "limit")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise PydanticCustomError("positive", "This value should be positive.")
        return value

    @field_validator("page")
    @classmethod
    def _page_bounded(cls, value: int) -> int:
        return _at_most(value, MAX_PAGE)

    @field_validator("limit")
    @classmethod
    def _limit_bounded(cls, value: int) -> int:
        return _at_most(value, settings.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        """SQL OFFSET value computed from the current page and limit."""
        return (self.page - 1) * self.limit


# --- Article write DTOs ---

class CreateArticleDto(BaseModel):
    model_config = _INPUT_CONFIG

    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    short_content: str = Field(min_length=1, max_length=255)
    user: int = Field(gt=0)


class UpdateArticleDto(BaseModel):
    """
    Partial update payload.

    Every field is optional, but a field that *is* sent must carry a real
    value: ``null`` is rejected rather than read as "leave unchanged".
    Presence is tracked by pydantic (``model_fields_set``); use
    :meth:`provided` to get only the fields the client actually sent.
    """

    model_config = _INPUT_CONFIG

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    short_content: str | None = Field(None, min_length=1, max_length=255)
    user: int | None = Field(None, gt=0)

    @field_validator("title", "content", "short_content", "user", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("not_null", "This value should not be null.")
        return value

    def provided(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


# --- Projections ---

class UserIndex(BaseModel):
    """``common:index`` group: public identity of a user."""

    model_config = _OUTPUT_CONFIG

    id: int
    username: str
    first_name: str
    last_name: str


class ArticleShow(BaseModel):
    """``articles:index`` + ``articles:show`` groups."""

    model_config = _OUTPUT_CONFIG

    id: int
    title: str
    content: str
    short_content: str
    created_at: datetime
    updated_at: datetime
    user: UserIndex | None = None


class PageMeta(BaseModel):
    total: int
    pages: int


class ArticlePage(BaseModel):
    items: list[ArticleShow]
    meta: PageMeta


class CreatedResponse(BaseModel):
    id: int


# --- Auth ---

class LoginDto(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: str
    token_type: str = "bearer"
