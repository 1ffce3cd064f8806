"""Integration tests for CLI commands."""

import pytest
from click.testing import CliRunner

from movieverse.cli import cli
from movieverse.config import ConfigManager
from movieverse.core.models import SortKey
from movieverse.core.services import MovieListController, RemotePager
from movieverse.utils import MovieBackendError


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


def invoke(runner, container, args, **kwargs):
    return runner.invoke(cli, args, obj={"container": container}, **kwargs)


@pytest.mark.integration
def test_list_shows_page(runner, container, backend):
    """Test listing one page."""
    result = invoke(runner, container, ["list", "--page", "2"])

    assert result.exit_code == 0, result.output
    assert "Alien" in result.output
    assert "Heat" in result.output
    assert "Dune" not in result.output
    assert "Page 2 of 3 - showing 2 of 2 - sort: none" in result.output
    assert "Genres: Sci-Fi, Crime" in result.output
    assert backend.closed


@pytest.mark.integration
def test_list_sorted_and_filtered(runner, container, backend):
    """Test sorting on the server and filtering the page locally."""
    result = invoke(
        runner, container, ["list", "--sort", "rating", "--page", "3", "--min-rating", "8.4"]
    )

    assert result.exit_code == 0, result.output
    assert "Dune" in result.output
    assert "Alien" in result.output
    assert "showing 2 of 2 - sort: rating" in result.output
    assert backend.list_calls() == [("list", 3, SortKey.RATING)]


@pytest.mark.integration
def test_list_with_no_match(runner, container):
    """Test the empty filtered view."""
    result = invoke(runner, container, ["list", "--query", "zzz"])

    assert result.exit_code == 0, result.output
    assert "No movies match the current filters." in result.output
    assert "showing 0 of 2" in result.output


@pytest.mark.integration
def test_list_failure_exits_non_zero(runner, container, backend):
    """Test that a refused listing is reported."""
    backend.list_error = "Session expired"

    result = invoke(runner, container, ["list"])

    assert result.exit_code == 1
    assert "Error: Failed to fetch page 1: Session expired" in result.output


@pytest.mark.integration
def test_add_with_prompts(runner, container, backend):
    """Test adding a movie with prompted fields."""
    result = invoke(runner, container, ["add"], input="Arrival\nSci-Fi\n2016-11-11\n7.9\n")

    assert result.exit_code == 0, result.output
    assert "Movie added." in result.output
    assert "Arrival" in result.output
    assert backend.movies[0].title == "Arrival"


@pytest.mark.integration
def test_add_invalid_rating(runner, container, backend):
    """Test that invalid input is reported and nothing is sent."""
    result = invoke(
        runner,
        container,
        [
            "add",
            "--title",
            "Arrival",
            "--genre",
            "Sci-Fi",
            "--release-date",
            "2016-11-11",
            "--rating",
            "great",
        ],
    )

    assert result.exit_code == 1
    assert "Rating must be a number" in result.output
    assert backend.calls == []


@pytest.mark.integration
def test_update_movie(runner, container, backend):
    """Test updating a movie."""
    result = invoke(
        runner,
        container,
        [
            "update",
            "2",
            "--title",
            "Clue",
            "--genre",
            "Mystery",
            "--release-date",
            "1985-12-13",
            "--rating",
            "7.5",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Movie updated." in result.output
    assert "Mystery" in result.output
    assert backend.movies[1].rating == 7.5


@pytest.mark.integration
def test_update_unknown_movie(runner, container):
    """Test that a refused update exits non-zero."""
    result = invoke(
        runner,
        container,
        ["update", "missing"],
        input="Clue\nMystery\n1985-12-13\n7.5\n",
    )

    assert result.exit_code == 1
    assert "Movie not found" in result.output


@pytest.mark.integration
def test_delete_with_yes(runner, container, backend):
    """Test deleting without a prompt."""
    result = invoke(runner, container, ["delete", "1", "--yes"])

    assert result.exit_code == 0, result.output
    assert "Movie deleted." in result.output
    assert all(movie.id != "1" for movie in backend.movies)


@pytest.mark.integration
def test_delete_cancelled(runner, container, backend):
    """Test declining the delete confirmation."""
    result = invoke(runner, container, ["delete", "1"], input="n\n")

    assert result.exit_code == 0
    assert "Cancelled." in result.output
    assert backend.calls == []


@pytest.mark.integration
def test_delete_last_movie_on_last_page(runner, container, backend):
    """Test that the view moves back when the shown page disappears."""
    backend.movies = backend.movies[:5]

    result = invoke(runner, container, ["delete", "5", "--page", "3"], input="y\n")

    assert result.exit_code == 0, result.output
    assert "Page 2 of 2" in result.output
    assert [call[1] for call in backend.list_calls()] == [3, 3, 2]


@pytest.mark.integration
def test_status(runner, container):
    """Test the status command."""
    result = invoke(runner, container, ["status"])

    assert result.exit_code == 0, result.output
    assert "Backend: http://movies.test" in result.output
    assert "Send credentials: yes" in result.output
    assert "Default sort: none" in result.output
    assert "Backend Status: ✓ 3 page(s)" in result.output


@pytest.mark.integration
def test_status_unreachable(runner, container, backend):
    """Test the status command when the backend fails."""
    backend.list_error = "Service unavailable"

    result = invoke(runner, container, ["status"])

    assert result.exit_code == 1
    assert "Backend Status: ✗" in result.output


@pytest.mark.integration
def test_init_creates_config(runner, tmp_path):
    """Test creating a configuration file."""
    output = tmp_path / "config" / "config.yaml"

    result = runner.invoke(
        cli, ["init", "--output", str(output), "--base-url", "http://localhost:5000"]
    )

    assert result.exit_code == 0, result.output
    assert f"Configuration file created at: {output}" in result.output
    config = ConfigManager(output, load_env=False).load_config()
    assert config.backend.base_url == "http://localhost:5000"


@pytest.mark.integration
def test_init_keeps_existing_config(runner, temp_config_file):
    """Test declining to overwrite an existing file."""
    before = temp_config_file.read_text()

    result = runner.invoke(cli, ["init", "--output", str(temp_config_file)], input="n\n")

    assert result.exit_code == 0
    assert temp_config_file.read_text() == before


@pytest.mark.integration
def test_missing_config_is_reported(runner, tmp_path, monkeypatch):
    """Test that commands fail cleanly without configuration."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("MOVIEVERSE_CONFIG", raising=False)

    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 1
    assert "Configuration error" in result.output


@pytest.mark.integration
@pytest.mark.asyncio
async def test_controller_flow_through_container(container, backend):
    """Test browsing and editing through container-built services."""
    async with container:
        controller = container.get(MovieListController)
        assert container.get(RemotePager) is container.get(RemotePager)

        assert await controller.fetch_page(1)
        assert await controller.next_page()
        assert controller.snapshot().page.current_page == 2

        assert await controller.create(
            {"title": "Arrival", "genre": "Sci-Fi", "release_date": "2016-11-11", "rating": 7.9}
        )
        snapshot = controller.snapshot()
        assert snapshot.page.current_page == 1
        assert snapshot.page.total_pages == 4
        assert snapshot.view[0].title == "Arrival"

        new_id = snapshot.view[0].id
        assert await controller.delete(new_id)
        assert controller.snapshot().page.total_pages == 3

    assert backend.closed


@pytest.mark.integration
def test_validate_good_file(runner, temp_config_file):
    """Test validating a configuration file."""
    result = runner.invoke(cli, ["validate", str(temp_config_file)])

    assert result.exit_code == 0, result.output
    assert "is valid" in result.output


@pytest.mark.integration
def test_validate_bad_file(runner, tmp_path):
    """Test validating a configuration file with a bad URL."""
    config_file = tmp_path / "bad.yaml"
    config_file.write_text('backend:\n  base_url: "movies.test"\n')

    result = runner.invoke(cli, ["--config", str(config_file), "validate"])

    assert result.exit_code == 1
    assert "base_url must start with http" in result.output


@pytest.mark.integration
def test_add_reports_failed_reload(runner, container, backend):
    """Test that an applied create with a failed reload says so."""
    backend.list_error = MovieBackendError("connection reset")

    result = invoke(
        runner,
        container,
        ["add"],
        input="Arrival\nSci-Fi\n2016-11-11\n7.9\n",
    )

    assert result.exit_code == 1
    assert "create succeeded but the page could not be reloaded" in result.output
    assert [movie.title for movie in backend.movies].count("Arrival") == 1
