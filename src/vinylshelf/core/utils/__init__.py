"""Utility helpers for vinylshelf."""
