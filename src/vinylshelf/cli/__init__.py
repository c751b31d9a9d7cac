"""Command line interface for vinylshelf."""
