from __future__ import annotations
from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .crypto import DIGEST_PATTERN


class Orientation(str, Enum):
    """Which operand a sibling digest is when re-hashing against the accumulator."""

    LEFT = "left"
    RIGHT = "right"


class PathNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    orientation: Orientation
    digest: str = Field(pattern=DIGEST_PATTERN)


# ordered from the leaf-adjacent height up to the root-adjacent height
AuthenticationPath = List[PathNode]


class InclusionProof(BaseModel):
    """Proof envelope for storing or transmitting one leaf's path.

    ``tree_size`` pins the expected path length, so a truncated or padded
    path is rejected when the envelope is loaded rather than failing as a
    silent mismatch.
    """

    index: int = Field(ge=0)
    tree_size: int = Field(ge=1)
    root: str = Field(pattern=DIGEST_PATTERN)
    path: List[PathNode]

    @property
    def height(self) -> int:
        return self.tree_size.bit_length() - 1

    @model_validator(mode="after")
    def _shape_matches_tree(self):
        if self.tree_size & (self.tree_size - 1):
            raise ValueError("tree_size must be a power of two")
        if self.index >= self.tree_size:
            raise ValueError("index out of range for tree_size")
        if len(self.path) != self.height:
            raise ValueError(
                f"path has {len(self.path)} entries, expected {self.height}"
            )
        return self


class Verification(BaseModel):
    """Outcome of a verification; the leaf is echoed back either way."""

    status: Literal["ok", "error"]
    leaf: bytes

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def __bool__(self) -> bool:
        return self.ok
