"""Product candidate validator service."""
