"""Movie-related data models."""

from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ...utils.exceptions import ValidationError
from ...utils.text_utils import format_date, is_blank, parse_date, parse_rating


class SortKey(str, Enum):
    """Server-side sort options."""

    NONE = ""
    TITLE = "title"
    RATING = "rating"

    @classmethod
    def parse(cls, value: Union["SortKey", str, None]) -> "SortKey":
        """Parse a sort key, treating None and "none" as no sorting."""
        if isinstance(value, SortKey):
            return value
        if value is None or value.strip().lower() in ("", "none"):
            return cls.NONE
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown sort key {value!r}; expected one of: "
                f"{[key.value or 'none' for key in cls]}"
            )


class Movie(BaseModel):
    """A movie record as held by the backend.

    The controller only ever holds copies, so instances are frozen.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="_id", description="Server-assigned identifier")
    title: str = Field(..., min_length=1, description="Movie title")
    genre: str = Field(default="", description="Genre")
    release_date: date = Field(..., description="Release date")
    rating: float = Field(..., description="Rating, conventionally 0-10")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Identifiers are opaque; numeric ids are kept as text."""
        if v is None:
            raise ValueError("Movie id is required")
        return str(v)

    @field_validator("release_date", mode="before")
    @classmethod
    def parse_release_date(cls, v: Any) -> date:
        """Accept plain dates and full ISO timestamps."""
        parsed = parse_date(v)
        if parsed is None:
            raise ValueError(f"Invalid release date: {v!r}")
        return parsed

    @classmethod
    def from_backend(cls, data: Mapping[str, Any]) -> "Movie":
        """Build a movie from a backend document.

        Args:
            data: Raw backend record (``_id`` or ``id`` accepted).

        Returns:
            Movie instance.

        Raises:
            TypeError: If ``data`` is not a mapping.
            pydantic.ValidationError: If a field is missing or malformed.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Movie record must be a mapping, got {type(data).__name__}")
        payload = dict(data)
        if "_id" not in payload and "id" in payload:
            payload["_id"] = payload.pop("id")
        return cls.model_validate(payload)


class MovieFields(BaseModel):
    """Editable movie fields sent on create and update."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, description="Movie title")
    genre: str = Field(..., min_length=1, description="Genre")
    release_date: date = Field(..., description="Release date")
    rating: float = Field(..., allow_inf_nan=False, description="Rating")

    @classmethod
    def from_input(
        cls,
        title: Any = None,
        genre: Any = None,
        release_date: Any = None,
        rating: Any = None,
    ) -> "MovieFields":
        """Validate raw form input into movie fields.

        Args:
            title: Title as typed.
            genre: Genre as typed.
            release_date: Release date (date or ``YYYY-MM-DD`` text).
            rating: Rating (number or numeric text).

        Returns:
            Validated fields.

        Raises:
            ValidationError: If a field is missing or malformed.
        """
        raw = {"title": title, "genre": genre, "release_date": release_date, "rating": rating}
        missing = [name for name, value in raw.items() if is_blank(value)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        parsed_date = parse_date(release_date)
        if parsed_date is None:
            raise ValidationError(f"Invalid release date: {release_date!r}")

        parsed_rating = parse_rating(rating)
        if parsed_rating is None:
            raise ValidationError(f"Rating must be a number, got {rating!r}")

        try:
            return cls(
                title=str(title).strip(),
                genre=str(genre).strip(),
                release_date=parsed_date,
                rating=parsed_rating,
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

    @classmethod
    def coerce(cls, fields: Union["MovieFields", Mapping[str, Any]]) -> "MovieFields":
        """Accept either validated fields or a raw mapping."""
        if isinstance(fields, MovieFields):
            return fields
        return cls.from_input(
            title=fields.get("title"),
            genre=fields.get("genre"),
            release_date=fields.get("release_date", fields.get("releaseDate")),
            rating=fields.get("rating"),
        )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize for the backend."""
        return {
            "title": self.title,
            "genre": self.genre,
            "release_date": format_date(self.release_date),
            "rating": self.rating,
        }


def display_rating(value: Optional[float]) -> str:
    """Rating as shown in listings; whole numbers lose the trailing ``.0``."""
    if value is None:
        return ""
    return f"{value:g}"
