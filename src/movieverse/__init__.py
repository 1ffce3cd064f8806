"""MovieVerse.

Browse, filter and edit a remote movie collection page by page, keeping the
local view consistent with the backend while requests are in flight.
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("movieverse")
except PackageNotFoundError:
    # Running from a source checkout
    __version__ = "0.1.0-dev"

__author__ = "MovieVerse Team"
