"""Core data models."""

from .backend_result import ListPageResult, MutationResult
from .movie import Movie, MovieFields, SortKey, display_rating
from .page_state import FILTER_FIELDS, FetchStatus, FilterCriteria, PageState
from .view_snapshot import FORM_FIELDS, FormMode, MovieForm, ViewSnapshot

__all__ = [
    "Movie",
    "MovieFields",
    "SortKey",
    "display_rating",
    "PageState",
    "FetchStatus",
    "FilterCriteria",
    "FILTER_FIELDS",
    "ListPageResult",
    "MutationResult",
    "FormMode",
    "MovieForm",
    "FORM_FIELDS",
    "ViewSnapshot",
]
