from __future__ import annotations
import json
import logging
import pathlib
from typing import List, NoReturn, Optional

import typer
from pydantic import TypeAdapter
from rich import print
from rich.markup import escape

from hashtree.errors import InvalidInput
from hashtree.logutil import setup_logging
from hashtree.merkle import MerkleTree, merkle_root
from hashtree.models import InclusionProof
from hashtree.settings import settings
from hashtree_sdk.verify import verify_proof

app = typer.Typer(add_completion=False, no_args_is_help=True)
log = logging.getLogger("hashtree_cli")

_proofs = TypeAdapter(List[InclusionProof])


def _fail(message: str) -> NoReturn:
    print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=2)


def _read_leaves(source: str) -> List[bytes]:
    """A directory yields one leaf per file (sorted by name); a file one per line."""
    p = pathlib.Path(source)
    try:
        if p.is_dir():
            leaves = [f.read_bytes() for f in sorted(p.iterdir()) if f.is_file()]
        elif p.is_file():
            leaves = p.read_bytes().splitlines()
        else:
            _fail(f"No such file or directory: {source}")
    except OSError as e:
        _fail(f"Cannot read leaves from {source}: {e}")
    if len(leaves) > settings.max_leaves:
        log.warning("refusing %d leaves (max %d)", len(leaves), settings.max_leaves)
        _fail(f"{len(leaves)} leaves exceeds HASHTREE_MAX_LEAVES={settings.max_leaves}")
    return leaves


def _load_proof(path: str, index: Optional[int]) -> InclusionProof:
    try:
        obj = json.loads(pathlib.Path(path).read_text())
        if isinstance(obj, list):
            proofs = _proofs.validate_python(obj)
            if index is None:
                _fail("Proof file holds several proofs; pass --index")
            matches = [p for p in proofs if p.index == index]
            if not matches:
                _fail(f"No proof for index {index} in {path}")
            return matches[0]
        proof = InclusionProof.model_validate(obj)
    except (OSError, ValueError) as e:
        # pydantic's ValidationError and json's JSONDecodeError are ValueErrors
        _fail(f"Invalid proof file {path}: {e}")
    if index is not None and proof.index != index:
        _fail(f"Proof in {path} is for index {proof.index}, not {index}")
    return proof


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, help="Log level (defaults to HASHTREE_LOG_LEVEL)"
    ),
):
    setup_logging(log_level or settings.log_level)


@app.command()
def root(source: str = typer.Argument(..., help="Leaf file (one per line) or directory")):
    """Print the Merkle root of the leaves in SOURCE."""
    leaves = _read_leaves(source)
    try:
        digest = merkle_root(leaves)
    except InvalidInput as e:
        _fail(str(e))
    print(digest)


@app.command()
def paths(
    source: str = typer.Argument(..., help="Leaf file (one per line) or directory"),
    out: Optional[str] = typer.Option(None, help="Write proofs here instead of stdout"),
):
    """Emit an inclusion proof for every leaf in SOURCE."""
    leaves = _read_leaves(source)
    try:
        tree = MerkleTree.from_leaves(leaves)
    except InvalidInput as e:
        _fail(str(e))
    proofs = [
        InclusionProof(index=i, tree_size=tree.size, root=tree.root, path=path)
        for i, path in enumerate(tree.iter_authentication_paths())
    ]
    text = _proofs.dump_json(proofs, indent=settings.proof_indent or None).decode()
    if out is None:
        typer.echo(text)
        return
    try:
        pathlib.Path(out).write_text(text)
    except OSError as e:
        _fail(f"Cannot write proofs to {out}: {e}")
    print(f"[green]Wrote {len(proofs)} proofs to {out}[/green]")


@app.command()
def verify(
    proof: str = typer.Argument(..., help="Proof JSON written by `paths`"),
    leaf: Optional[str] = typer.Option(None, help="Leaf value (UTF-8)"),
    leaf_file: Optional[pathlib.Path] = typer.Option(
        None, exists=True, dir_okay=False, readable=True, help="Read the leaf bytes from a file"
    ),
    index: Optional[int] = typer.Option(None, help="Leaf index when PROOF holds many proofs"),
):
    """Check a leaf against the root and path stored in PROOF."""
    if (leaf is None) == (leaf_file is None):
        _fail("Pass exactly one of --leaf or --leaf-file")
    if leaf is not None:
        data = leaf.encode("utf-8")
    else:
        try:
            data = leaf_file.read_bytes()
        except OSError as e:
            _fail(f"Cannot read leaf from {leaf_file}: {e}")
    p = _load_proof(proof, index)
    try:
        result = verify_proof(data, p)
    except InvalidInput as e:
        _fail(str(e))
    print({"verified": result.ok, "index": p.index})
    if not result:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
