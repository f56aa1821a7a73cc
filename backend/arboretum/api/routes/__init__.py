"""Route modules for the Arboretum API."""
from . import admin, auth, trees, users

__all__ = ["auth", "users", "trees", "admin"]
