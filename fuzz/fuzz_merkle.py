"""Fuzz harness for Merkle tree construction & streamed authentication paths."""
from __future__ import annotations
import atheris
import sys

with atheris.instrument_imports():
    from hashtree.merkle import MerkleTree, merkle_root
    from hashtree_sdk.verify import verify


def TestOneInput(data: bytes):  # noqa: N802
    if not data:
        return
    # Leaf count is 2**k for k in 0..5; bounded so each run stays cheap.
    count = 1 << (data[0] % 6)
    size = max(1, (len(data) - 1) // count)
    body = data[1:]
    leaves = [body[i * size : (i + 1) * size] for i in range(count)]
    tree = MerkleTree.from_leaves(leaves)
    if merkle_root(leaves) != tree.root:
        raise RuntimeError("standalone root disagrees with built tree")
    for idx, path in enumerate(tree.iter_authentication_paths()):
        if path != tree.inclusion_proof(idx):
            raise RuntimeError(f"streamed path differs at leaf {idx}")
        if not verify(leaves[idx], tree.root, path, height=tree.height):
            raise RuntimeError("valid authentication path failed")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
