"""Unit tests for the movie list controller."""

import pytest

from movieverse.core.models import FetchStatus, FormMode, SortKey
from movieverse.utils import (
    FetchFailed,
    MovieBackendError,
    MutationFailed,
    RefetchFailed,
    ValidationError,
)


def view_titles(snapshot):
    return [movie.title for movie in snapshot.view]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_page_produces_snapshot(controller):
    """Test the snapshot after a successful fetch."""
    assert await controller.fetch_page(1)

    snapshot = controller.snapshot()
    assert view_titles(snapshot) == ["Dune", "Clue"]
    assert snapshot.record_count == 2
    assert snapshot.available_genres == ("Sci-Fi", "Comedy")
    assert snapshot.page.total_pages == 3
    assert snapshot.status == FetchStatus.SETTLED
    assert snapshot.last_error is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failure_is_surfaced_then_cleared(controller, backend):
    """Test that a failed fetch sets last_error and a later success clears it."""
    backend.list_error = "Session expired"

    assert not await controller.fetch_page(1)
    assert isinstance(controller.last_error, FetchFailed)
    assert "Session expired" in str(controller.last_error)
    assert controller.snapshot().status == FetchStatus.FAILED

    backend.list_error = None
    assert await controller.refresh()
    assert controller.last_error is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_dismiss_error(controller, backend):
    """Test dismissing the surfaced error."""
    backend.list_error = MovieBackendError("timeout")
    await controller.fetch_page(1)

    controller.dismiss_error()

    assert controller.last_error is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_noop_navigation_keeps_error(controller, backend):
    """Test that navigating past the last page leaves last_error alone."""
    await controller.fetch_page(3)
    backend.list_error = "down for maintenance"
    await controller.refresh()

    assert await controller.next_page()

    assert isinstance(controller.last_error, FetchFailed)
    assert backend.list_calls()[-1] == ("list", 3, SortKey.NONE)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_filters_narrow_the_view_only(controller):
    """Test that filtering never touches the held page."""
    await controller.fetch_page(1)

    assert controller.set_filter_field("query", "dune")

    snapshot = controller.snapshot()
    assert view_titles(snapshot) == ["Dune"]
    assert snapshot.record_count == 2
    assert snapshot.available_genres == ("Sci-Fi", "Comedy")
    assert snapshot.criteria.query == "dune"

    controller.reset_filters()
    assert view_titles(controller.snapshot()) == ["Dune", "Clue"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_filter_with_no_match(controller):
    """Test the empty filtered view."""
    await controller.fetch_page(1)
    controller.set_filter_field("min_rating", "9")

    assert controller.snapshot().is_filtered_empty


@pytest.mark.unit
@pytest.mark.asyncio
async def test_filter_edit_keeps_error(controller, backend):
    """Test that editing filters does not dismiss a remote error."""
    backend.list_error = "down"
    await controller.fetch_page(1)

    controller.set_filter_field("genre", "Crime")

    assert isinstance(controller.last_error, FetchFailed)


@pytest.mark.unit
def test_unknown_filter_field(controller):
    """Test that an unknown filter field is surfaced."""
    assert not controller.set_filter_field("director", "Villeneuve")
    assert isinstance(controller.last_error, ValidationError)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_subscribers_receive_snapshots(controller):
    """Test subscribe and unsubscribe."""
    received = []
    unsubscribe = controller.subscribe(received.append)

    await controller.fetch_page(2)

    assert received
    assert received[0].status == FetchStatus.FETCHING
    assert view_titles(received[-1]) == ["Alien", "Heat"]

    unsubscribe()
    count = len(received)
    controller.set_filter_field("query", "heat")
    assert len(received) == count


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_form_submit(controller, backend):
    """Test creating a movie through the add form."""
    await controller.fetch_page(2)
    controller.open_add_form()
    controller.set_form_field("title", "Arrival")
    controller.set_form_field("genre", "Sci-Fi")
    controller.set_form_field("release_date", "2016-11-11")
    controller.set_form_field("rating", 7.9)

    assert await controller.submit_form()

    snapshot = controller.snapshot()
    assert snapshot.form.mode == FormMode.CLOSED
    assert snapshot.form.title == ""
    assert snapshot.page.current_page == 1
    assert view_titles(snapshot)[0] == "Arrival"
    assert snapshot.last_error is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_invalid_form_is_preserved(controller, backend):
    """Test that a rejected form keeps its contents."""
    controller.open_add_form()
    controller.set_form_field("title", "Arrival")
    controller.set_form_field("genre", "Sci-Fi")
    controller.set_form_field("release_date", "2016-11-11")
    controller.set_form_field("rating", "great")

    assert not await controller.submit_form()

    snapshot = controller.snapshot()
    assert isinstance(snapshot.last_error, ValidationError)
    assert snapshot.form.mode == FormMode.ADD
    assert snapshot.form.title == "Arrival"
    assert snapshot.form.rating == "great"
    assert backend.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_rejected_create_keeps_form(controller, backend):
    """Test that a backend rejection keeps the form open."""
    backend.mutation_error = "Duplicate title"
    controller.open_add_form()
    for name, value in (
        ("title", "Dune"),
        ("genre", "Sci-Fi"),
        ("release_date", "2021-10-22"),
        ("rating", "8.5"),
    ):
        controller.set_form_field(name, value)

    assert not await controller.submit_form()

    assert isinstance(controller.last_error, MutationFailed)
    assert controller.snapshot().form.mode == FormMode.ADD


@pytest.mark.unit
@pytest.mark.asyncio
async def test_edit_form_submit(controller, backend, dune):
    """Test editing a movie through the form."""
    await controller.fetch_page(1)
    controller.open_edit_form(dune)

    form = controller.snapshot().form
    assert form.mode == FormMode.EDIT
    assert form.movie_id == "1"
    assert form.release_date == "2021-10-22"
    assert form.rating == "8.5"

    controller.set_form_field("rating", "9")
    assert await controller.submit_form()

    assert backend.calls[-2][0] == "update"
    assert controller.snapshot().view[0].rating == 9.0
    assert controller.snapshot().form.mode == FormMode.CLOSED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_submit_without_form(controller):
    """Test submitting when no form is open."""
    assert not await controller.submit_form()
    assert isinstance(controller.last_error, ValidationError)


@pytest.mark.unit
def test_unknown_form_field(controller):
    """Test that unknown form inputs are rejected."""
    controller.open_add_form()

    assert not controller.set_form_field("director", "Villeneuve")
    assert isinstance(controller.last_error, ValidationError)


@pytest.mark.unit
def test_close_form_discards_input(controller):
    """Test closing the form."""
    controller.open_add_form()
    controller.set_form_field("title", "Arrival")

    controller.close_form()

    assert controller.snapshot().form.mode == FormMode.CLOSED
    assert controller.snapshot().form.title == ""


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_unknown_movie(controller):
    """Test that a refused delete is surfaced."""
    await controller.fetch_page(1)

    assert not await controller.delete("missing")
    assert isinstance(controller.last_error, MutationFailed)
    assert view_titles(controller.snapshot()) == ["Dune", "Clue"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_refreshes_page(controller):
    """Test that a delete re-fetches the page."""
    await controller.fetch_page(1)

    assert await controller.delete("1")

    assert view_titles(controller.snapshot()) == ["Clue", "Alien"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_set_sort(controller):
    """Test sorting by title."""
    await controller.fetch_page(2)

    assert await controller.set_sort("title")

    snapshot = controller.snapshot()
    assert snapshot.page.current_page == 1
    assert snapshot.page.sort_key == SortKey.TITLE
    assert view_titles(snapshot) == ["Alien", "Clue"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_sort_is_surfaced(controller, backend):
    """Test that an unknown sort key fails without a request."""
    assert not await controller.set_sort("year")
    assert isinstance(controller.last_error, ValidationError)
    assert backend.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_close_releases_backend(controller, backend):
    """Test closing the controller."""
    await controller.close()

    assert backend.closed


def fill_add_form(controller, title="Arrival"):
    controller.open_add_form()
    controller.set_form_field("title", title)
    controller.set_form_field("genre", "Sci-Fi")
    controller.set_form_field("release_date", "2016-11-11")
    controller.set_form_field("rating", "7.9")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_applied_create_closes_form_when_reload_fails(controller, backend):
    """Test that an accepted create is never offered for resubmission."""
    await controller.fetch_page(1)
    fill_add_form(controller)
    backend.list_error = MovieBackendError("flaky")

    assert await controller.submit_form()

    snapshot = controller.snapshot()
    assert snapshot.form.mode == FormMode.CLOSED
    assert isinstance(snapshot.last_error, RefetchFailed)
    assert view_titles(snapshot) == ["Dune", "Clue"]

    backend.list_error = None
    assert not await controller.submit_form()
    assert [movie.title for movie in backend.movies].count("Arrival") == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_applied_update_closes_form_when_reload_fails(controller, backend, dune):
    """Test the same for the edit form."""
    await controller.fetch_page(1)
    controller.open_edit_form(dune)
    controller.set_form_field("rating", "9")
    backend.list_error = "Session expired"

    assert await controller.submit_form()

    assert controller.snapshot().form.mode == FormMode.CLOSED
    assert isinstance(controller.last_error, RefetchFailed)
    assert backend.movies[0].rating == 9.0

    backend.list_error = None
    assert await controller.refresh()
    assert controller.last_error is None
    assert controller.snapshot().view[0].rating == 9.0
