"""Users presentation layer - HTTP routes for the user resource."""

from __future__ import annotations

from users.presentation.errors import register_exception_handlers
from users.presentation.routes import router

__all__ = ["register_exception_handlers", "router"]
