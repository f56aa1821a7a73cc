"""Service layer for catalog tree persistence."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from arboretum.core import policy
from arboretum.core.errors import ForbiddenError, NotFoundError, ValidationError
from arboretum.core.sessions import Identity
from arboretum.db.session import is_row_id, storage_call
from arboretum.models.tree import Tree
from arboretum.schemas.tree import TreePayload, normalize_facts

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "scientific_name", "description", "habitat", "image")


def _tree_fields(data: TreePayload) -> dict[str, Any]:
    fields: dict[str, Any] = {name: getattr(data, name, None) for name in REQUIRED_FIELDS}
    missing = [name for name, value in fields.items() if not isinstance(value, str) or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    try:
        fields["facts"] = normalize_facts(data.facts)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    return fields


async def _load_tree(session: AsyncSession, tree_id: int) -> Tree | None:
    if not is_row_id(tree_id):
        return None
    result = await session.execute(
        select(Tree).options(selectinload(Tree.creator)).where(Tree.id == tree_id)
    )
    return result.scalar_one_or_none()


@storage_call
async def list_trees(session: AsyncSession) -> list[Tree]:
    result = await session.execute(
        select(Tree)
        .options(selectinload(Tree.creator))
        .order_by(Tree.created_at.desc(), Tree.id.desc())
    )
    return list(result.scalars().all())


@storage_call
async def get_tree(session: AsyncSession, tree_id: int) -> Tree | None:
    return await _load_tree(session, tree_id)


@storage_call
async def create_tree(session: AsyncSession, owner_id: int, data: TreePayload) -> Tree:
    tree = Tree(created_by=owner_id, **_tree_fields(data))
    session.add(tree)
    await session.flush()
    logger.info("User %s added tree %s (%s)", owner_id, tree.id, tree.name)
    return tree


@storage_call
async def update_tree(session: AsyncSession, tree_id: int, actor: Identity, data: TreePayload) -> Tree:
    fields = _tree_fields(data)
    tree = await _load_tree(session, tree_id)
    if tree is None:
        raise NotFoundError("Tree not found")
    if not policy.can_modify(actor, tree.created_by):
        raise ForbiddenError("You do not have permission to edit this tree")

    for name, value in fields.items():
        setattr(tree, name, value)
    await session.flush()
    logger.info("User %s updated tree %s", actor.id, tree_id)
    return tree


@storage_call
async def delete_tree(session: AsyncSession, tree_id: int, actor: Identity) -> None:
    tree = await _load_tree(session, tree_id)
    if tree is None:
        raise NotFoundError("Tree not found")
    if not policy.can_modify(actor, tree.created_by):
        raise ForbiddenError("You do not have permission to delete this tree")

    await session.delete(tree)
    await session.flush()
    logger.info("User %s deleted tree %s", actor.id, tree_id)
