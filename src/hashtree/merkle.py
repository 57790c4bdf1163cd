from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from .crypto import leaf_digest, node_digest
from .errors import InvalidInput, InvalidState
from .models import AuthenticationPath, Orientation, PathNode

log = logging.getLogger(__name__)


def _tree_height(size: int) -> int:
    """Height of a perfect tree over ``size`` leaves."""
    if size < 1 or size & (size - 1):
        raise InvalidInput(
            f"leaf count must be a power of two, got {size}", size=size
        )
    return size.bit_length() - 1


def _parents(level: List[str], height: int) -> List[str]:
    if len(level) % 2:
        raise InvalidInput(
            f"level {height} has odd length {len(level)}; "
            "leaf count must be a power of two",
            size=len(level),
            height=height,
        )
    return [node_digest(level[i], level[i + 1]) for i in range(0, len(level), 2)]


def merkle_root(leaves: Sequence[bytes]) -> str:
    """Fold the leaves to the root without keeping intermediate levels."""
    _tree_height(len(leaves))
    lvl = [leaf_digest(leaf) for leaf in leaves]
    height = 0
    while len(lvl) > 1:
        lvl = _parents(lvl, height)
        height += 1
    return lvl[0]


@dataclass
class MerkleTree:
    levels: List[List[str]]  # level 0 = leaf digests, last level = [root]

    @classmethod
    def from_leaves(cls, leaves: Sequence[bytes]) -> "MerkleTree":
        height = _tree_height(len(leaves))
        lvl = [leaf_digest(leaf) for leaf in leaves]
        levels = [lvl]
        while len(lvl) > 1:
            lvl = _parents(lvl, len(levels) - 1)
            levels.append(lvl)
        log.debug("built merkle tree size=%d height=%d", len(leaves), height)
        return cls(levels)

    @property
    def size(self) -> int:
        return len(self.levels[0])

    @property
    def height(self) -> int:
        return len(self.levels) - 1

    @property
    def root(self) -> str:
        return self.levels[-1][0]

    def inclusion_proof(self, index: int) -> AuthenticationPath:
        """Walk siblings from one leaf to the root.

        O(H) for a single leaf; use iter_authentication_paths() when every
        leaf's path is needed.
        """
        if not 0 <= index < self.size:
            raise InvalidInput(
                f"leaf index {index} out of range for {self.size} leaves",
                size=self.size,
                index=index,
            )
        proof = []
        idx = index
        for level in self.levels[:-1]:
            if idx % 2:
                proof.append(PathNode(orientation=Orientation.LEFT, digest=level[idx - 1]))
            else:
                proof.append(PathNode(orientation=Orientation.RIGHT, digest=level[idx + 1]))
            idx //= 2
        return proof

    def iter_authentication_paths(self) -> Iterator[AuthenticationPath]:
        """Yield the path of every leaf, in leaf order."""
        traversal = AuthPathTraversal(self)
        yield traversal.path()
        for _ in range(self.size - 1):
            traversal.advance()
            yield traversal.path()
        log.debug(
            "generated %d authentication paths height=%d", self.size, self.height
        )

    def authentication_paths(self) -> List[AuthenticationPath]:
        return list(self.iter_authentication_paths())


class AuthPathTraversal:
    """Streaming authentication-path state for one tree.

    ``auth[h]`` is the sibling valid for the current leaf at height ``h``;
    ``stack[h]`` is the node that takes its place the next time leaf index
    crosses a multiple of ``2**h``. Height ``h`` is touched ``2**(H-h)``
    times over a full run, so producing all N paths costs O(N*H).
    """

    def __init__(self, tree: MerkleTree) -> None:
        self._levels = tree.levels
        self.height = tree.height
        self.size = tree.size
        self.leaf = 0
        self.auth: List[PathNode] = [
            PathNode(orientation=Orientation.RIGHT, digest=tree.levels[h][1])
            for h in range(self.height)
        ]
        self.stack: List[Optional[PathNode]] = [
            PathNode(orientation=Orientation.LEFT, digest=tree.levels[h][0])
            for h in range(self.height)
        ]

    def path(self) -> AuthenticationPath:
        return list(self.auth)

    def advance(self) -> None:
        """Move from the current leaf to the next one."""
        nxt = self.leaf + 1
        if nxt >= self.size:
            raise InvalidState(
                f"cannot advance past leaf {self.leaf} of {self.size}",
                size=self.size,
                index=nxt,
            )
        h = 0
        while h < self.height and nxt % (1 << h) == 0:
            staged = self.stack[h]
            if staged is None:
                raise InvalidState(
                    f"no node staged at height {h} for leaf {nxt}",
                    height=h,
                    index=nxt,
                )
            self.auth[h] = staged
            if staged.orientation is Orientation.LEFT:
                start = nxt + 2 * (1 << h)
            elif staged.orientation is Orientation.RIGHT:
                start = nxt
            else:
                raise InvalidState(
                    f"untagged node staged at height {h}", height=h, index=nxt
                )
            self.stack[h] = self._stage(h, start >> h)
            h += 1
        self.leaf = nxt

    def _stage(self, height: int, idx: int) -> Optional[PathNode]:
        level = self._levels[height]
        if idx >= len(level):
            # this height has no more siblings to hand out
            return None
        orientation = Orientation.LEFT if idx % 2 == 0 else Orientation.RIGHT
        return PathNode(orientation=orientation, digest=level[idx])


def build_root(leaves: Sequence[bytes]) -> str:
    return merkle_root(leaves)


def build_authentication_paths(leaves: Sequence[bytes]) -> List[AuthenticationPath]:
    """One authentication path per leaf, index-aligned with ``leaves``."""
    return MerkleTree.from_leaves(leaves).authentication_paths()
