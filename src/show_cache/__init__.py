"""Read-through cache for TMDB show metadata."""

__version__ = "0.1.0"
