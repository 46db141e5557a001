"""Content and access-control core for a threaded discussion forum."""

__version__ = "0.1.0"
