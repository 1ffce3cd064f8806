#!/usr/bin/env python3
"""Seed a development backend with sample movies."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

from movieverse.config import ConfigManager
from movieverse.core.interfaces import IMovieBackend
from movieverse.core.models import MovieFields
from movieverse.infrastructure import Container, setup_logging
from movieverse.utils import MovieverseError

# (title, genre, release date, rating)
SAMPLE_MOVIES = [
    ("Dune", "Sci-Fi", "2021-10-22", 8.5),
    ("Clue", "Comedy", "1985-12-13", 7.2),
    ("Alien", "Sci-Fi", "1979-05-25", 8.5),
    ("Heat", "Crime", "1995-12-15", 8.3),
    ("Amélie", "Comedy", "2001-04-25", 8.3),
    ("Arrival", "Sci-Fi", "2016-11-11", 7.9),
    ("Fargo", "Crime", "1996-03-08", 8.1),
    ("Spirited Away", "Animation", "2001-07-20", 8.6),
    ("Paddington 2", "Comedy", "2017-11-10", 7.8),
    ("Whiplash", "Drama", "2014-10-10", 8.5),
    ("Up", "Animation", "2009-05-29", 8.3),
    ("Moonlight", "Drama", "2016-10-21", 7.4),
]


async def seed(config_path: Optional[Path]) -> int:
    """Create every sample movie; returns the number created."""
    container = Container(ConfigManager(config_path))
    setup_logging(container.get_config().logging)
    container.configure_default_services()
    backend = container.get(IMovieBackend)  # type: ignore

    created = 0
    try:
        for title, genre, release_date, rating in SAMPLE_MOVIES:
            fields = MovieFields.from_input(title, genre, release_date, rating)
            result = await backend.create_movie(fields)
            if result.success:
                created += 1
                print(f"✓ {title}")
            else:
                print(f"✗ {title}: {result.msg}")
    finally:
        await container.close()

    return created


def main() -> None:
    """Entry point."""
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    try:
        created = asyncio.run(seed(config_path))
    except (MovieverseError, FileNotFoundError) as e:
        print(f"Seeding failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"\nCreated {created}/{len(SAMPLE_MOVIES)} movies")


if __name__ == "__main__":
    main()
