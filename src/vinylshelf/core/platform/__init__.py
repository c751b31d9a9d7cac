"""External platform integrations for vinylshelf."""
