# kiwisdk/models.py
"""Request options and response envelopes of the record API.

Field names follow Python conventions; the backend's camelCase names are
mapped through aliases, so models validate straight from the JSON bodies.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .exceptions import ValidationError
from .filter import Filter

Record = dict[str, Any]
"""An untyped record, as returned when no model is bound."""

T = TypeVar("T")


class ListOptions(BaseModel):
    """Paging, filtering and sorting for a list call.

    Zero or empty values count as "not set" and are left out of the query
    string, so ``ListOptions()`` sends no list parameters at all.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    page: int | None = Field(default=None, description="1-based page number")
    per_page: int | None = Field(default=None, description="Records per page")
    filter: str | Filter | None = Field(
        default=None, description="Filter expression, or a Filter to build"
    )
    sort: str | None = Field(
        default=None, description="Sort fields, '-' prefix for descending"
    )

    @field_validator("page", "per_page")
    @classmethod
    def check_not_negative(
        cls, value: int | None, info: ValidationInfo
    ) -> int | None:
        if value is not None and value < 0:
            raise ValidationError(
                f"{info.field_name} must not be negative, got {value}"
            )
        return value

    def to_query_params(self) -> dict[str, str]:
        """Returns the query parameters for the set options."""
        params: dict[str, str] = {}
        if self.page:
            params["page"] = str(self.page)
        if self.per_page:
            params["perPage"] = str(self.per_page)
        if self.filter:
            expression = (
                self.filter.build() if isinstance(self.filter, Filter) else self.filter
            )
            params["filter"] = expression
        if self.sort:
            params["sort"] = self.sort
        return params


class CreateResult(BaseModel):
    """Identity and metadata the backend assigns to a newly created record.

    Any other fields echoed back by the backend are kept as extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    collection_id: str | None = Field(default=None, alias="collectionId")
    collection_name: str | None = Field(default=None, alias="collectionName")
    created: str | None = None
    updated: str | None = None


class ListResult(BaseModel, Generic[T]):
    """One page of a list call."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    per_page: int = Field(alias="perPage")
    total_items: int = Field(alias="totalItems")
    total_pages: int = Field(alias="totalPages")
    items: list[T] = Field(default_factory=list)
