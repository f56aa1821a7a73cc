"""Catalog tree endpoints. Reads are public; writes need a session."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from arboretum.core.dependencies import get_current_identity, get_db
from arboretum.core.errors import NotFoundError
from arboretum.core.sessions import Identity
from arboretum.db.session import commit
from arboretum.schemas.common import MessageResponse
from arboretum.schemas.tree import (
    TreeCreatedResponse,
    TreeListResponse,
    TreePayload,
    TreeRead,
    TreeResponse,
)
from arboretum.services import trees as tree_service

router = APIRouter(prefix="/trees", tags=["trees"])


@router.get("", response_model=TreeListResponse)
async def list_trees(session: AsyncSession = Depends(get_db)) -> TreeListResponse:
    trees = await tree_service.list_trees(session)
    return TreeListResponse(trees=[TreeRead.model_validate(tree) for tree in trees])


@router.get("/{tree_id}", response_model=TreeResponse)
async def get_tree(tree_id: int, session: AsyncSession = Depends(get_db)) -> TreeResponse:
    tree = await tree_service.get_tree(session, tree_id)
    if tree is None:
        raise NotFoundError("Tree not found")
    return TreeResponse(tree=TreeRead.model_validate(tree))


@router.post("", response_model=TreeCreatedResponse)
async def create_tree(
    payload: TreePayload,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> TreeCreatedResponse:
    tree = await tree_service.create_tree(session, identity.id, payload)
    await commit(session)
    return TreeCreatedResponse(id=tree.id)


@router.put("/{tree_id}", response_model=MessageResponse)
async def update_tree(
    tree_id: int,
    payload: TreePayload,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> MessageResponse:
    await tree_service.update_tree(session, tree_id, identity, payload)
    await commit(session)
    return MessageResponse(message="Tree updated")


@router.delete("/{tree_id}", response_model=MessageResponse)
async def delete_tree(
    tree_id: int,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> MessageResponse:
    await tree_service.delete_tree(session, tree_id, identity)
    await commit(session)
    return MessageResponse(message="Tree deleted")
