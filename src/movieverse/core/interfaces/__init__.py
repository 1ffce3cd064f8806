"""Core interfaces for dependency injection."""

from .movie_backend import IMovieBackend

__all__ = [
    "IMovieBackend",
]
