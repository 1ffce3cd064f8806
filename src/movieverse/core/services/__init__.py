"""Core service implementations."""

from .movie_backend import MovieBackend
from .movie_list_controller import MovieListController
from .remote_pager import RemotePager
from .view_projector import ViewProjector, distinct_genres, project

__all__ = [
    "MovieBackend",
    "RemotePager",
    "ViewProjector",
    "MovieListController",
    "project",
    "distinct_genres",
]
