"""Pytest configuration and fixtures."""

import pytest
from fakes import FakeMovieBackend, make_movie

from movieverse.config import Config, ConfigManager
from movieverse.core.interfaces import IMovieBackend
from movieverse.core.services import MovieListController, RemotePager, ViewProjector
from movieverse.infrastructure import Container


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast tests without I/O")
    config.addinivalue_line("markers", "integration: tests wiring several components")


@pytest.fixture
def dune():
    """Dune (2021)."""
    return make_movie("1", "Dune", "Sci-Fi", "2021-10-22", 8.5)


@pytest.fixture
def clue():
    """Clue (1985)."""
    return make_movie("2", "Clue", "Comedy", "1985-12-13", 7.2)


@pytest.fixture
def catalog(dune, clue):
    """Six movies, three pages of two."""
    return [
        dune,
        clue,
        make_movie("3", "Alien", "Sci-Fi", "1979-05-25", 8.4),
        make_movie("4", "Heat", "Crime", "1995-12-15", 8.3),
        make_movie("5", "Fargo", "Crime", "1996-03-08", 8.1),
        make_movie("6", "Up", "Animation", "2009-05-29", 8.2),
    ]


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file."""
    config_content = """
backend:
  base_url: "http://movies.test/"
  timeout: 5
  with_credentials: true

view:
  default_sort: ""

logging:
  level: "DEBUG"
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file, load_env=False)


@pytest.fixture
def config(config_manager) -> Config:
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def backend(catalog):
    """Fake backend holding the catalog."""
    return FakeMovieBackend(catalog, page_size=2)


@pytest.fixture
def pager(backend, config):
    """Remote pager over the fake backend."""
    return RemotePager(backend, config)


@pytest.fixture
def controller(pager):
    """Controller over the fake backend."""
    return MovieListController(pager, ViewProjector())


@pytest.fixture
def container(config_manager, backend):
    """Container wired with the fake backend."""
    container = Container(config_manager)
    container.register_instance(IMovieBackend, backend)  # type: ignore
    container.configure_default_services()
    return container
