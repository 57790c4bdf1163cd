"""Inclusion proof fuzzing with mutated leaves, siblings and orientations."""
from __future__ import annotations
import atheris
import sys
import random

with atheris.instrument_imports():
    from hashtree.errors import InvalidInput
    from hashtree.merkle import MerkleTree
    from hashtree.models import Orientation, PathNode
    from hashtree_sdk.verify import verify


def TestOneInput(data: bytes):  # noqa: N802
    if len(data) < 8:
        return
    seed = int.from_bytes(data[:4], 'little')
    random.seed(seed)
    chunk_len = 1 + (data[4] % 32)
    body = data[5:]
    raw = [body[i:i+chunk_len] for i in range(0, min(len(body), chunk_len * 16), chunk_len)]
    leaves = [x for x in raw if x]
    # Trim to the largest power of two; odd counts must be rejected.
    try:
        MerkleTree.from_leaves(leaves)
    except InvalidInput:
        if leaves and len(leaves) & (len(leaves) - 1) == 0:
            raise RuntimeError("power-of-two leaf count rejected")
    leaves = leaves[: 1 << (len(leaves).bit_length() - 1)] if leaves else []
    if len(leaves) < 2 or len(set(leaves)) != len(leaves):
        return
    tree = MerkleTree.from_leaves(leaves)
    idx = seed % len(leaves)
    path = tree.authentication_paths()[idx]
    mode = random.randrange(4)
    if mode == 0:
        leaf = bytes([leaves[idx][0] ^ 0x01]) + leaves[idx][1:]
        if leaf in leaves:
            return
        ok = verify(leaf, tree.root, path)
    elif mode == 1:
        pos = random.randrange(len(path))
        sib = path[pos].digest
        flipped = "0" if sib[0] != "0" else "1"
        path[pos] = PathNode(orientation=path[pos].orientation, digest=flipped + sib[1:])
        ok = verify(leaves[idx], tree.root, path)
    elif mode == 2:
        pos = random.randrange(len(path))
        other = Orientation.LEFT if path[pos].orientation is Orientation.RIGHT else Orientation.RIGHT
        path[pos] = PathNode(orientation=other, digest=path[pos].digest)
        ok = verify(leaves[idx], tree.root, path)
    else:
        if not verify(leaves[idx], tree.root, path):
            raise RuntimeError("valid proof failed")
        return
    if ok:
        raise RuntimeError("tampered proof unexpectedly verified")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
