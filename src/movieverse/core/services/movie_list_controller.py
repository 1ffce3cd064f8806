"""Movie list controller: intents in, snapshots out."""

from typing import Any, Awaitable, Callable, List, Optional, Union

from ...infrastructure.logging import LoggerMixin
from ...utils import (
    FetchFailed,
    MovieverseError,
    MutationFailed,
    RefetchFailed,
    ValidationError,
    format_date,
)
from ..models import (
    FORM_FIELDS,
    FormMode,
    Movie,
    MovieForm,
    SortKey,
    ViewSnapshot,
    display_rating,
)
from .remote_pager import FieldsInput, RemotePager
from .view_projector import ViewProjector, distinct_genres

SnapshotListener = Callable[[ViewSnapshot], None]

SURFACED_ERRORS = (ValidationError, FetchFailed, MutationFailed)


class MovieListController(LoggerMixin):
    """Coordinates the remote pager, the filter projector and the add/edit form.

    Every intent that fails stores the error as ``last_error`` and returns
    False; the next successful remote operation or ``dismiss_error`` clears
    it. Subscribers receive a fresh snapshot after every state change.
    """

    def __init__(self, pager: RemotePager, projector: ViewProjector) -> None:
        """Initialize controller.

        Args:
            pager: Remote pager.
            projector: Filter projector.
        """
        self._pager = pager
        self._projector = projector
        self._last_error: Optional[MovieverseError] = None
        self._form = MovieForm()
        self._subscribers: List[SnapshotListener] = []
        self._pager.add_listener(self._emit)

    @property
    def last_error(self) -> Optional[MovieverseError]:
        """Last surfaced error, if any."""
        return self._last_error

    def snapshot(self) -> ViewSnapshot:
        """Build the current read-only view state."""
        records = self._pager.records
        return ViewSnapshot(
            view=self._projector.view(records),
            page=self._pager.page_state,
            criteria=self._projector.criteria,
            last_error=self._last_error,
            status=self._pager.status,
            form=self._form,
            available_genres=distinct_genres(records),
            record_count=len(records),
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Receive a snapshot after every state change.

        Args:
            listener: Callback taking a snapshot.

        Returns:
            Callable that unsubscribes the listener.
        """
        self._subscribers.append(listener)

        def unsubscribe() -> None:
            if listener in self._subscribers:
                self._subscribers.remove(listener)

        return unsubscribe

    # Remote intents

    async def fetch_page(self, page: int, sort: Union[SortKey, str, None] = None) -> bool:
        """Show the given page."""
        return await self._run(f"fetch page {page}", lambda: self._pager.fetch_page(page, sort))

    async def refresh(self) -> bool:
        """Re-fetch the current page."""
        return await self._run("refresh", self._pager.refresh)

    async def set_sort(self, sort: Union[SortKey, str, None]) -> bool:
        """Change the sort; the view returns to page 1."""
        return await self._run(f"sort by {sort!r}", lambda: self._pager.set_sort(sort))

    async def next_page(self) -> bool:
        """Advance one page; no-op on the last page."""
        return await self._run("next page", self._pager.next_page)

    async def previous_page(self) -> bool:
        """Go back one page; no-op on the first page."""
        return await self._run("previous page", self._pager.previous_page)

    async def create(self, fields: FieldsInput) -> bool:
        """Create a movie; the view moves to page 1."""
        return await self._run("create movie", lambda: self._pager.create(fields))

    async def update(self, movie_id: str, fields: FieldsInput) -> bool:
        """Update a movie on the current page."""
        return await self._run(
            f"update movie {movie_id}", lambda: self._pager.update(movie_id, fields)
        )

    async def delete(self, movie_id: str) -> bool:
        """Delete a movie. Callers confirm with the user first."""
        return await self._run(f"delete movie {movie_id}", lambda: self._pager.delete(movie_id))

    # Local intents

    def set_filter_field(self, name: str, value: Any) -> bool:
        """Change one filter field; the view is recomputed immediately."""
        try:
            self._projector.set_filter_field(name, value)
        except ValidationError as e:
            return self._fail(f"set filter {name}", e)
        self._emit()
        return True

    def reset_filters(self) -> None:
        """Remove all filter constraints."""
        self._projector.reset_filters()
        self._emit()

    def dismiss_error(self) -> None:
        """Clear the surfaced error."""
        if self._last_error is not None:
            self._last_error = None
            self._emit()

    # Add/edit form

    def open_add_form(self) -> None:
        """Open an empty add form."""
        self._form = MovieForm(mode=FormMode.ADD)
        self._emit()

    def open_edit_form(self, movie: Movie) -> None:
        """Open the edit form pre-filled with ``movie``."""
        self._form = MovieForm(
            mode=FormMode.EDIT,
            movie_id=movie.id,
            title=movie.title,
            genre=movie.genre,
            release_date=format_date(movie.release_date),
            rating=display_rating(movie.rating),
        )
        self._emit()

    def set_form_field(self, name: str, value: Any) -> bool:
        """Change one form input."""
        if name not in FORM_FIELDS:
            return self._fail(
                f"set form field {name}",
                ValidationError(f"Unknown form field {name!r}; expected one of {FORM_FIELDS}"),
            )
        self._form = self._form.model_copy(update={name: "" if value is None else str(value)})
        self._emit()
        return True

    def close_form(self) -> None:
        """Close and clear the form."""
        self._form = MovieForm()
        self._emit()

    async def submit_form(self) -> bool:
        """Submit the open form.

        On success the form is closed and cleared; on failure its contents
        are kept so the user can correct and resubmit. A change the backend
        accepted closes the form even if the page could not be reloaded.
        """
        form = self._form
        fields = {name: getattr(form, name) for name in FORM_FIELDS}

        if form.mode == FormMode.ADD:
            succeeded = await self.create(fields)
        elif form.mode == FormMode.EDIT and form.movie_id:
            succeeded = await self.update(form.movie_id, fields)
        else:
            return self._fail("submit form", ValidationError("No form is open"))

        if succeeded:
            self.close_form()
        return succeeded

    async def close(self) -> None:
        """Release remote resources."""
        await self._pager.close()

    async def _run(self, action: str, operation: Callable[[], Awaitable[Any]]) -> bool:
        """Run a remote intent and surface its outcome.

        A superseded fetch or a no-op navigation leaves ``last_error`` alone.
        A mutation that was applied counts as done even when the page could
        not be reloaded afterwards; the reload failure is still surfaced.
        """
        try:
            result = await operation()
        except RefetchFailed as e:
            self._fail(action, e)
            return True
        except SURFACED_ERRORS as e:
            return self._fail(action, e)

        if result is not None:
            self._last_error = None
        self._emit()
        return True

    def _fail(self, action: str, error: MovieverseError) -> bool:
        self.logger.warning(f"Could not {action}: {error}")
        self._last_error = error
        self._emit()
        return False

    def _emit(self) -> None:
        if not self._subscribers:
            return
        snapshot = self.snapshot()
        for listener in list(self._subscribers):
            listener(snapshot)
