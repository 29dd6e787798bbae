"""Local JSON API."""
