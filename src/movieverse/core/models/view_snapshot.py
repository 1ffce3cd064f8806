"""Presentation snapshot models."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .movie import Movie
from .page_state import FetchStatus, FilterCriteria, PageState

FORM_FIELDS = ("title", "genre", "release_date", "rating")


class FormMode(str, Enum):
    """Add/edit form visibility."""

    CLOSED = "closed"
    ADD = "add"
    EDIT = "edit"


class MovieForm(BaseModel):
    """Add/edit form contents, as typed by the user."""

    model_config = ConfigDict(frozen=True)

    mode: FormMode = Field(default=FormMode.CLOSED, description="Form mode")
    movie_id: Optional[str] = Field(None, description="Movie being edited")
    title: str = Field(default="", description="Title input")
    genre: str = Field(default="", description="Genre input")
    release_date: str = Field(default="", description="Release date input")
    rating: str = Field(default="", description="Rating input")


class ViewSnapshot(BaseModel):
    """Read-only state handed to the presentation layer after every change."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    view: Tuple[Movie, ...] = Field(default=(), description="Filtered movies to render")
    page: PageState = Field(default_factory=PageState, description="Pagination state")
    criteria: FilterCriteria = Field(
        default_factory=FilterCriteria, description="Active filter criteria"
    )
    last_error: Optional[Exception] = Field(None, description="Last surfaced error")
    status: FetchStatus = Field(default=FetchStatus.IDLE, description="Latest fetch status")
    form: MovieForm = Field(default_factory=MovieForm, description="Add/edit form")
    available_genres: Tuple[str, ...] = Field(
        default=(), description="Distinct genres on the current page"
    )
    record_count: int = Field(default=0, description="Movies on the current page before filtering")

    @property
    def is_filtered_empty(self) -> bool:
        """No movie matches the current filters."""
        return not self.view
