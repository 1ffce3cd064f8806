"""Utility functions and classes."""

from .exceptions import (
    ConfigurationError,
    FetchFailed,
    MovieBackendError,
    MovieverseError,
    MutationFailed,
    RefetchFailed,
    StaleResponse,
    ValidationError,
)
from .text_utils import format_date, is_blank, parse_date, parse_rating

__all__ = [
    "MovieverseError",
    "ConfigurationError",
    "MovieBackendError",
    "ValidationError",
    "FetchFailed",
    "MutationFailed",
    "RefetchFailed",
    "StaleResponse",
    "parse_rating",
    "parse_date",
    "format_date",
    "is_blank",
]
