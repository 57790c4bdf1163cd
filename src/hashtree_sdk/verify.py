from __future__ import annotations
import logging
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from hashtree.crypto import is_digest, leaf_digest, node_digest
from hashtree.errors import InvalidInput
from hashtree.models import AuthenticationPath, InclusionProof, Orientation, PathNode, Verification

log = logging.getLogger(__name__)


def _coerce_path(path: Iterable[Any]) -> AuthenticationPath:
    nodes: List[PathNode] = []
    for i, item in enumerate(path):
        if isinstance(item, PathNode):
            nodes.append(item)
            continue
        if isinstance(item, (tuple, list)):
            if len(item) != 2:
                raise InvalidInput(
                    f"path entry {i} is not an (orientation, digest) pair",
                    height=i,
                )
            item = {"orientation": item[0], "digest": item[1]}
        try:
            nodes.append(PathNode.model_validate(item))
        except ValidationError as e:
            raise InvalidInput(f"malformed path entry {i}", height=i) from e
    return nodes


def verify(
    leaf: bytes,
    root: str,
    path: Iterable[Any],
    height: Optional[int] = None,
) -> Verification:
    """Fold ``leaf`` with ``path`` and compare the result against ``root``.

    A mismatch is reported as ``status="error"``, not raised; only malformed
    input raises InvalidInput. When ``height`` is known, a path of any other
    length is rejected outright.
    """
    if not is_digest(root):
        raise InvalidInput("root is not a lowercase hex sha256 digest")
    nodes = _coerce_path(path)
    if height is not None and len(nodes) != height:
        raise InvalidInput(
            f"path has {len(nodes)} entries, tree height is {height}",
            height=height,
        )
    acc = leaf_digest(leaf)
    for node in nodes:
        if node.orientation is Orientation.LEFT:
            acc = node_digest(node.digest, acc)
        else:
            acc = node_digest(acc, node.digest)
    if acc == root:
        return Verification(status="ok", leaf=leaf)
    log.debug("root mismatch: computed %s expected %s", acc, root)
    return Verification(status="error", leaf=leaf)


def verify_proof(leaf: bytes, proof: InclusionProof) -> Verification:
    """Verify against a stored proof envelope."""
    return verify(leaf, proof.root, proof.path, height=proof.height)
