"""Ordered collection item model."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

PayloadT = TypeVar("PayloadT")


class OrderedItem(BaseModel, Generic[PayloadT]):
    """Item of a ``FileOrderList``; ``position`` changes on reorder, ``id`` never does."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    id: str = Field(min_length=1)
    payload: PayloadT
    position: int = Field(ge=0)
