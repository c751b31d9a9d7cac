"""Core functionality for vinylshelf."""
