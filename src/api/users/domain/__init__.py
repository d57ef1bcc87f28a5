"""Domain layer for the Users bounded context."""
