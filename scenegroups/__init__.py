"""Scene group loading: unload the old set, load the next, report progress."""

__version__ = "0.1.0"
