"""Pydantic schemas for catalog tree entries."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from arboretum.schemas.common import require_text

logger = logging.getLogger(__name__)

_SCALAR_FACT_TYPES = (str, int, float, bool)


def normalize_facts(value: Any) -> dict[str, str]:
    """Coerce client-supplied facts into a ``{str: str}`` map.

    Anything that is not an object becomes an empty map. Keys are stripped and
    blank keys or null values are dropped; scalar values are stringified.
    Nested objects or arrays are rejected, as are keys that only differ by
    surrounding whitespace.
    """
    if not isinstance(value, Mapping):
        if value is not None:
            logger.debug("Ignoring non-object facts payload of type %s", type(value).__name__)
        return {}

    facts: dict[str, str] = {}
    for raw_key, raw_value in value.items():
        key = str(raw_key).strip()
        if not key or raw_value is None:
            continue
        if key in facts:
            raise ValueError(f"fact '{key}' is given more than once")
        if not isinstance(raw_value, _SCALAR_FACT_TYPES):
            raise ValueError(f"fact '{key}' must be a text value")
        if isinstance(raw_value, bool):
            facts[key] = "true" if raw_value else "false"
        else:
            facts[key] = str(raw_value).strip()
    return facts


class TreePayload(BaseModel):
    """Body of create and update requests; every field is replaced on update."""

    name: str = Field(..., min_length=1, max_length=255)
    scientific_name: str = Field(..., alias="scientificName", min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    habitat: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    facts: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name", "scientific_name", "description", "habitat", "image")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return require_text(value)

    @field_validator("facts", mode="before")
    @classmethod
    def _normalize_facts(cls, value: Any) -> dict[str, str]:
        return normalize_facts(value)


class TreeRead(BaseModel):
    id: int
    name: str
    scientific_name: str
    description: str
    habitat: str
    image: str
    facts: dict[str, str] = {}
    created_by: int | None = None
    created_at: datetime
    creator_name: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("facts", mode="before")
    @classmethod
    def _stored_facts(cls, value: Any) -> dict[str, str]:
        return value if isinstance(value, dict) else {}


class TreeListResponse(BaseModel):
    success: bool = True
    trees: list[TreeRead]


class TreeResponse(BaseModel):
    success: bool = True
    tree: TreeRead


class TreeCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Tree added"
    id: int
