"""Infrastructure adapters for the Users bounded context."""
