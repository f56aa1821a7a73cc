"""SQLAlchemy models exposed for metadata creation and imports."""
from .tree import Tree
from .user import User

__all__ = ["User", "Tree"]
