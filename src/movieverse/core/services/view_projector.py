"""Client-side filtering of the current page."""

from typing import Any, Callable, Iterable, List, Tuple

from ...infrastructure.logging import LoggerMixin
from ...utils import ValidationError, is_blank, parse_date, parse_rating
from ..models import FILTER_FIELDS, FilterCriteria, Movie

ANY_GENRE = "any"

MoviePredicate = Callable[[Movie], bool]


def _active_predicates(criteria: FilterCriteria) -> List[MoviePredicate]:
    """Build one predicate per constraining field; empty or malformed values add none."""
    predicates: List[MoviePredicate] = []

    query = str(criteria.query or "").lower()
    if query:
        predicates.append(
            lambda movie: query in movie.title.lower() or query in (movie.genre or "").lower()
        )

    genre = criteria.genre
    if not is_blank(genre) and genre != ANY_GENRE:
        predicates.append(lambda movie: movie.genre == genre)

    min_date = parse_date(criteria.min_release_date)
    if min_date is not None:
        predicates.append(lambda movie: movie.release_date >= min_date)

    min_rating = parse_rating(criteria.min_rating)
    if min_rating is not None:
        predicates.append(lambda movie: movie.rating >= min_rating)

    return predicates


def project(records: Iterable[Movie], criteria: FilterCriteria) -> Tuple[Movie, ...]:
    """Filter movies by every active criterion.

    Pure and total: the result is an order-preserving subsequence of
    ``records`` and malformed criteria never raise.

    Args:
        records: Movies on the current page.
        criteria: Filter criteria.

    Returns:
        Movies matching all active criteria, in their original order.
    """
    predicates = _active_predicates(criteria)
    return tuple(movie for movie in records if all(check(movie) for check in predicates))


def distinct_genres(records: Iterable[Movie]) -> Tuple[str, ...]:
    """Genres present in ``records``, in first-seen order."""
    seen: List[str] = []
    for movie in records:
        if movie.genre and movie.genre not in seen:
            seen.append(movie.genre)
    return tuple(seen)


class ViewProjector(LoggerMixin):
    """Holds the filter criteria and projects the current page through them."""

    def __init__(self) -> None:
        """Initialize with no constraints."""
        self._criteria = FilterCriteria()

    @property
    def criteria(self) -> FilterCriteria:
        """Current filter criteria."""
        return self._criteria

    def set_filter_field(self, name: str, value: Any) -> FilterCriteria:
        """Set a single filter field.

        Args:
            name: One of ``query``, ``genre``, ``min_release_date``, ``min_rating``.
            value: New value as entered; blank clears the constraint.

        Returns:
            Updated criteria.

        Raises:
            ValidationError: If ``name`` is not a filter field.
        """
        return self.update(**{name: value})

    def update(self, **fields: Any) -> FilterCriteria:
        """Set several filter fields at once.

        Raises:
            ValidationError: If a name is not a filter field.
        """
        unknown = [name for name in fields if name not in FILTER_FIELDS]
        if unknown:
            raise ValidationError(
                f"Unknown filter field(s): {', '.join(unknown)}; expected one of {FILTER_FIELDS}"
            )

        if "query" in fields and fields["query"] is None:
            fields["query"] = ""

        self._criteria = self._criteria.model_copy(update=fields)
        self.logger.debug(f"Filter criteria: {self._criteria}")
        return self._criteria

    def reset_filters(self) -> FilterCriteria:
        """Clear all constraints."""
        self._criteria = FilterCriteria()
        return self._criteria

    def view(self, records: Iterable[Movie]) -> Tuple[Movie, ...]:
        """Project ``records`` through the current criteria."""
        return project(records, self._criteria)
