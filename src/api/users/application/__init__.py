"""Application layer for the Users bounded context."""
