"""vinylshelf - a personal vinyl collection synced with Discogs."""

__version__ = "0.1.0"
