"""Remote pagination and mutation service."""

import asyncio
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple, Union

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import (
    FetchFailed,
    MovieBackendError,
    MutationFailed,
    RefetchFailed,
    StaleResponse,
    ValidationError,
    is_blank,
)
from ..interfaces import IMovieBackend
from ..models import (
    FetchStatus,
    ListPageResult,
    Movie,
    MovieFields,
    MutationResult,
    PageState,
    SortKey,
)

Listener = Callable[[], None]
FieldsInput = Union[MovieFields, Mapping[str, Any]]


class RemotePager(LoggerMixin):
    """Keeps one page of the remote movie collection in sync with the backend.

    Every fetch is tagged with a sequence number and run as its own task.
    Issuing a fetch cancels the one in flight, and a response is applied only
    if it belongs to the most recently issued request. Page, sort and records
    change only when a response is applied; failures leave them untouched.
    Mutations never touch local records: each successful mutation is followed
    by a re-fetch.
    """

    def __init__(self, backend: IMovieBackend, config: Config) -> None:
        """Initialize remote pager.

        Args:
            backend: Movie backend.
            config: Application configuration.
        """
        self._backend = backend
        self._config = config
        self._records: Tuple[Movie, ...] = ()
        self._page_state = PageState(sort_key=SortKey.parse(config.view.default_sort))
        self._status = FetchStatus.IDLE
        self._sequence = 0
        self._inflight: Optional["asyncio.Task[ListPageResult]"] = None
        self._pending: Optional[Tuple[int, SortKey]] = None
        self._listeners: List[Listener] = []

    @property
    def records(self) -> Tuple[Movie, ...]:
        """Movies on the current page."""
        return self._records

    @property
    def page_state(self) -> PageState:
        """Current pagination state."""
        return self._page_state

    @property
    def status(self) -> FetchStatus:
        """Status of the latest fetch."""
        return self._status

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked after every state change.

        Args:
            listener: Callback without arguments.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def fetch_page(
        self, page: int, sort: Union[SortKey, str, None] = None
    ) -> Optional[Tuple[Movie, ...]]:
        """Fetch a page and make it current.

        If the backend reports fewer pages than ``page`` (the collection
        shrank), the last existing page is fetched instead.

        Args:
            page: 1-based page number.
            sort: Sort key; None keeps the active sort.

        Returns:
            Movies now held, or None if a newer request superseded this one.

        Raises:
            ValidationError: If ``page`` or ``sort`` is invalid.
            FetchFailed: If the backend call failed; state is unchanged.
        """
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValidationError(f"Page must be a positive integer, got {page!r}")
        sort_key = self._position()[1] if sort is None else SortKey.parse(sort)

        self._sequence += 1
        sequence = self._sequence
        if self._inflight is not None and not self._inflight.done():
            self.logger.debug(f"Cancelling superseded fetch before request #{sequence}")
            self._inflight.cancel()

        task = asyncio.ensure_future(self._backend.list_page(page, sort_key))
        self._inflight = task
        self._pending = (page, sort_key)
        self._set_status(FetchStatus.FETCHING)
        self.logger.debug(f"Request #{sequence}: page {page}, sort {sort_key.value or 'none'}")

        try:
            result = await task
        except asyncio.CancelledError:
            if sequence != self._sequence:
                self.logger.debug(f"Request #{sequence} cancelled by request #{self._sequence}")
                return None
            self._settle(FetchStatus.IDLE)
            raise
        except MovieBackendError as e:
            if sequence != self._sequence:
                self.logger.debug(f"Ignoring failure of superseded request #{sequence}: {e}")
                return None
            self._settle(FetchStatus.FAILED)
            raise FetchFailed(f"Failed to fetch page {page}: {e}") from e
        finally:
            if self._inflight is task:
                self._inflight = None

        try:
            self._check_current(sequence)
        except StaleResponse as e:
            self.logger.debug(f"Discarding stale response: {e}")
            return None

        if not result.success:
            self._settle(FetchStatus.FAILED)
            error_msg = f"Failed to fetch page {page}: {result.msg or 'backend refused'}"
            self.logger.error(error_msg)
            raise FetchFailed(error_msg)

        total_pages = max(1, result.total_pages or 1)
        if page > total_pages:
            self.logger.info(
                f"Page {page} no longer exists ({total_pages} pages), fetching page {total_pages}"
            )
            return await self.fetch_page(total_pages, sort_key)

        self._records = tuple(result.data)
        self._page_state = PageState(
            current_page=page, total_pages=total_pages, sort_key=sort_key
        )
        self.logger.info(f"Showing page {page} of {total_pages} ({len(self._records)} movies)")
        self._settle(FetchStatus.SETTLED)
        return self._records

    async def refresh(self) -> Optional[Tuple[Movie, ...]]:
        """Re-fetch the current page with the active sort."""
        page, sort_key = self._position()
        return await self.fetch_page(page, sort_key)

    async def set_sort(self, sort: Union[SortKey, str, None]) -> Optional[Tuple[Movie, ...]]:
        """Change the sort and go back to page 1.

        Page numbers are meaningless across sort orders, so the position is
        always reset.
        """
        return await self.fetch_page(1, SortKey.NONE if sort is None else SortKey.parse(sort))

    async def next_page(self) -> Optional[Tuple[Movie, ...]]:
        """Advance one page; no-op on the last page."""
        page, sort_key = self._position()
        if page >= self._page_state.total_pages:
            self.logger.debug("Already on the last page")
            return None
        return await self.fetch_page(page + 1, sort_key)

    async def previous_page(self) -> Optional[Tuple[Movie, ...]]:
        """Go back one page; no-op on the first page."""
        page, sort_key = self._position()
        if page <= 1:
            self.logger.debug("Already on the first page")
            return None
        return await self.fetch_page(page - 1, sort_key)

    async def create(self, fields: FieldsInput) -> MutationResult:
        """Create a movie and show page 1.

        Args:
            fields: Movie fields (validated or raw mapping).

        Returns:
            Backend acknowledgement.

        Raises:
            ValidationError: If a field is missing or malformed; nothing is sent.
            MutationFailed: If the backend did not create the movie.
            RefetchFailed: If the change was applied but the follow-up fetch failed.
        """
        movie_fields = MovieFields.coerce(fields)
        result = await self._mutate("create", lambda: self._backend.create_movie(movie_fields))
        await self._reload_after("create", result, 1)
        return result

    async def update(self, movie_id: str, fields: FieldsInput) -> MutationResult:
        """Update a movie and re-fetch the current page.

        Args:
            movie_id: Movie identifier.
            fields: Movie fields (validated or raw mapping).

        Returns:
            Backend acknowledgement.

        Raises:
            ValidationError: If the id or a field is missing or malformed.
            MutationFailed: If the backend did not apply the update.
            RefetchFailed: If the change was applied but the follow-up fetch failed.
        """
        self._require_id(movie_id)
        movie_fields = MovieFields.coerce(fields)
        result = await self._mutate(
            f"update {movie_id}", lambda: self._backend.update_movie(movie_id, movie_fields)
        )
        await self._reload_after(f"update {movie_id}", result)
        return result

    async def delete(self, movie_id: str) -> MutationResult:
        """Delete a movie and re-fetch the current page.

        Confirmation is the caller's concern. The movie stays in the held
        page until the backend confirms and the page is re-fetched.

        Args:
            movie_id: Movie identifier.

        Returns:
            Backend acknowledgement.

        Raises:
            ValidationError: If the id is blank.
            MutationFailed: If the backend did not delete the movie.
            RefetchFailed: If the change was applied but the follow-up fetch failed.
        """
        self._require_id(movie_id)
        result = await self._mutate(
            f"delete {movie_id}", lambda: self._backend.delete_movie(movie_id)
        )
        await self._reload_after(f"delete {movie_id}", result)
        return result

    async def close(self) -> None:
        """Cancel any in-flight fetch and release the backend."""
        if self._inflight is not None and not self._inflight.done():
            self._sequence += 1
            self._inflight.cancel()
        self._inflight = None
        self._pending = None
        await self._backend.close()

    async def _mutate(
        self, action: str, call: Callable[[], Awaitable[MutationResult]]
    ) -> MutationResult:
        """Run a mutation call, converting failures into MutationFailed."""
        try:
            result = await call()
        except MovieBackendError as e:
            error_msg = f"Failed to {action}: {e}"
            self.logger.error(error_msg)
            raise MutationFailed(error_msg) from e

        if not result.success:
            error_msg = f"Failed to {action}: {result.msg or 'backend rejected the change'}"
            self.logger.error(error_msg)
            raise MutationFailed(error_msg)

        return result

    async def _reload_after(
        self, action: str, result: MutationResult, page: Optional[int] = None
    ) -> None:
        """Re-fetch after an acknowledged mutation.

        ``page`` defaults to the current page. A failed re-fetch is reported
        apart from the mutation, which has already been applied.
        """
        current_page, sort_key = self._position()
        try:
            await self.fetch_page(page or current_page, sort_key)
        except FetchFailed as e:
            error_msg = f"{action} succeeded but the page could not be reloaded: {e}"
            self.logger.error(error_msg)
            raise RefetchFailed(error_msg, result) from e

    def _position(self) -> Tuple[int, SortKey]:
        """Page and sort of the latest request, or of the settled state."""
        if self._pending is not None:
            return self._pending
        return self._page_state.current_page, self._page_state.sort_key

    def _check_current(self, sequence: int) -> None:
        if sequence != self._sequence:
            raise StaleResponse(sequence, self._sequence)

    def _settle(self, status: FetchStatus) -> None:
        self._pending = None
        self._set_status(status)

    def _set_status(self, status: FetchStatus) -> None:
        self._status = status
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    @staticmethod
    def _require_id(movie_id: str) -> None:
        if is_blank(movie_id):
            raise ValidationError("Movie id is required")
