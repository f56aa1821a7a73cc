"""Authorization decisions for catalog and account mutations.

Both functions are pure: they look only at the acting identity and the ids
involved. Services call them before touching storage and raise
``ForbiddenError`` on a deny.
"""
from __future__ import annotations

from arboretum.core.sessions import Identity


def can_modify(actor: Identity, owner_id: int | None) -> bool:
    """Owner or admin may edit/delete a record. Orphaned records are admin-only."""
    return actor.is_admin or (owner_id is not None and actor.id == owner_id)


def can_delete_user(actor: Identity, target_id: int) -> bool:
    return actor.is_admin and actor.id != target_id
