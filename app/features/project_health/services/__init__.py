"""Project health services."""
