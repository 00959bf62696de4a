"""Quote-related data models for the FavQs API and the aggregated response."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from qas.core.constants import RequestLimits
from qas.exceptions import InvalidRequest

T = TypeVar("T")


class Quote(BaseModel):
    """A single quote as served by the provider. Never mutated after fetch."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    body: str = ""
    author: str | None = None
    author_permalink: str | None = None
    tags: list[str] = Field(default_factory=list)
    url: str | None = None
    favorites_count: int = 0
    upvotes_count: int = 0
    downvotes_count: int = 0
    dialogue: bool = False
    private: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """The provider serves numeric ids; identity is compared as text."""
        if isinstance(v, bool) or v is None:
            raise ValueError("quote id must be a string or integer")
        return str(v)

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v: Any) -> Any:
        return [] if v is None else v


class QuotesRequest(BaseModel):
    """Validated shape of a ``get_quotes`` call."""

    model_config = ConfigDict(strict=True, frozen=True)

    count: int = Field(ge=RequestLimits.MIN_COUNT)
    page: int = Field(default=RequestLimits.DEFAULT_PAGE, ge=RequestLimits.MIN_PAGE)
    page_size: int = Field(
        default=RequestLimits.DEFAULT_PAGE_SIZE,
        ge=RequestLimits.MIN_PAGE_SIZE,
        le=RequestLimits.MAX_PAGE_SIZE,
    )
    tag: str | None = None

    @field_validator("tag")
    @classmethod
    def normalize_tag(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("tag must not be blank")
        return v

    @property
    def is_tagged(self) -> bool:
        return self.tag is not None

    @classmethod
    def create(cls, count: Any, page: Any = 1, page_size: Any = 25, tag: Any = None) -> "QuotesRequest":
        """Build a request, translating validation failures to InvalidRequest.

        Raises:
            InvalidRequest: If any field violates its constraints
        """
        try:
            return cls(count=count, page=page, page_size=page_size, tag=tag)
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else "request"
            raise InvalidRequest(field, error.get("input"), f"Invalid {field}: {error['msg']}") from e


class PaginationInfo(BaseModel):
    """Pagination block of the response envelope."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    page: int
    page_size: int = Field(alias="pageSize")
    total_requested: int = Field(alias="totalRequested")
    has_more: bool = Field(alias="hasMore")


class PaginatedResponse(BaseModel, Generic[T]):
    """``{items, pagination}`` envelope returned to clients."""

    items: list[T] = Field(default_factory=list)
    pagination: PaginationInfo

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the client-facing field names."""
        return self.model_dump(by_alias=True)
