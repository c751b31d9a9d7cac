"""Configuration loading for vinylshelf."""
