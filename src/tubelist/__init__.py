"""Channel metadata and paginated video listings from YouTube browse responses."""

__version__ = "0.1.0"
