"""Pagination and filter state models."""

from datetime import date
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .movie import SortKey


class FetchStatus(str, Enum):
    """Lifecycle of the latest page fetch."""

    IDLE = "idle"
    FETCHING = "fetching"
    SETTLED = "settled"
    FAILED = "failed"


class PageState(BaseModel):
    """Pagination and sort bookkeeping."""

    model_config = ConfigDict(frozen=True)

    current_page: int = Field(default=1, ge=1, description="1-based current page")
    total_pages: int = Field(default=1, ge=1, description="Total pages reported by the backend")
    sort_key: SortKey = Field(default=SortKey.NONE, description="Active sort")

    @property
    def has_next(self) -> bool:
        """Whether a following page exists."""
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        """Whether a preceding page exists."""
        return self.current_page > 1


FILTER_FIELDS = ("query", "genre", "min_release_date", "min_rating")


class FilterCriteria(BaseModel):
    """Client-side filter constraints.

    Values are kept as entered; a blank or malformed value places no
    constraint on the view.
    """

    model_config = ConfigDict(frozen=True)

    query: str = Field(default="", description="Case-insensitive title/genre search")
    genre: Optional[str] = Field(default=None, description="Exact genre, None for any")
    min_release_date: Optional[Union[date, str]] = Field(
        default=None, description="Earliest release date"
    )
    min_rating: Optional[Union[float, str]] = Field(default=None, description="Minimum rating")

    @property
    def is_empty(self) -> bool:
        """True when no field carries a value."""
        return self == FilterCriteria()
