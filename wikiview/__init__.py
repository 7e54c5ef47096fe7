from wikiview.version import __version__

__appname__ = "wikiview"

__all__ = ["__appname__", "__version__"]
