from __future__ import annotations

from importlib import metadata

__version__ = "0.3.0"

DISTRIBUTION_NAME = "wikiview"


def get_version() -> str:
    """Version of the installed distribution, or the source tree's for a checkout."""
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return __version__
