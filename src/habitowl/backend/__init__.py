"""Cloud backend bootstrap."""

from .firebase import BackendServices, get_backend, initialize_backend, reset_backend

__all__ = ["BackendServices", "get_backend", "initialize_backend", "reset_backend"]
