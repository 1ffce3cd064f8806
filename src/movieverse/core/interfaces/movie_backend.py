"""Movie backend interface."""

from abc import ABC, abstractmethod

from ..models import ListPageResult, MovieFields, MutationResult, SortKey


class IMovieBackend(ABC):
    """Interface for the remote movie collection."""

    @abstractmethod
    async def list_page(self, page: int, sort: SortKey) -> ListPageResult:
        """List one page of movies.

        Idempotent and free of side effects.

        Args:
            page: 1-based page number.
            sort: Sort key.

        Returns:
            Page result; ``success`` is False on a logical failure.

        Raises:
            MovieBackendError: If the request cannot be delivered.
        """
        pass

    @abstractmethod
    async def create_movie(self, fields: MovieFields) -> MutationResult:
        """Create a movie. Not idempotent; callers must not retry.

        Args:
            fields: Validated movie fields.

        Returns:
            Mutation result.

        Raises:
            MovieBackendError: If the request cannot be delivered.
        """
        pass

    @abstractmethod
    async def update_movie(self, movie_id: str, fields: MovieFields) -> MutationResult:
        """Replace the fields of an existing movie.

        Args:
            movie_id: Movie identifier.
            fields: Validated movie fields.

        Returns:
            Mutation result.

        Raises:
            MovieBackendError: If the request cannot be delivered.
        """
        pass

    @abstractmethod
    async def delete_movie(self, movie_id: str) -> MutationResult:
        """Delete a movie. Deleting an unknown id is a failure.

        Args:
            movie_id: Movie identifier.

        Returns:
            Mutation result.

        Raises:
            MovieBackendError: If the request cannot be delivered.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources."""
        pass
