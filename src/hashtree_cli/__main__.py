from __future__ import annotations
import json
import logging
import pathlib
from typing import List, Optional

import typer
from rich import print

from hashtree_core.crypto import HEX, digest_equal
from hashtree_core.errors import HashTreeError
from hashtree_core.logutil import setup_logging
from hashtree_core.proof import verify_proof
from hashtree_core.settings import settings
from hashtree_core.tree import Tree
from hashtree_sdk.verify import load_proof, parse_root, verify_data_against_document

app = typer.Typer(add_completion=False, no_args_is_help=True)

DEMO_BLOCKS = [
    b"Transaction 1: Alice -> Bob",
    b"Transaction 2: Bob -> Charlie",
    b"Transaction 3: Charlie -> David",
    b"Transaction 4: David -> Alice",
]


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    setup_logging(level=level, truncate_hex=settings.log_truncate_hex)


def _read_block(path: pathlib.Path) -> bytes:
    size = path.stat().st_size
    if size > settings.max_cli_block_bytes:
        raise typer.BadParameter(
            f"{path} is {size} bytes; limit is {settings.max_cli_block_bytes}"
        )
    return path.read_bytes()


def _load_tree(files: List[pathlib.Path]) -> Tree:
    try:
        return Tree([_read_block(p) for p in files])
    except HashTreeError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def root(files: List[pathlib.Path] = typer.Argument(..., exists=True, dir_okay=False)):
    """Print the root digest over FILES, one block per file in argument order."""
    tree = _load_tree(files)
    typer.echo(
        json.dumps(
            {
                "root_hash": HEX(tree.root()),
                "leaf_count": tree.leaf_count(),
                "depth": tree.depth(),
            }
        )
    )


@app.command()
def prove(
    files: List[pathlib.Path] = typer.Argument(..., exists=True, dir_okay=False),
    index: Optional[int] = typer.Option(None, help="Leaf index to prove"),
    data_file: Optional[pathlib.Path] = typer.Option(
        None, exists=True, dir_okay=False, help="Prove the leaf holding this file's bytes"
    ),
    out: Optional[pathlib.Path] = typer.Option(None, help="Write the proof JSON here"),
):
    """Generate an inclusion proof by leaf index or by block content."""
    if (index is None) == (data_file is None):
        raise typer.BadParameter("pass exactly one of --index or --data-file")
    tree = _load_tree(files)
    try:
        if index is not None:
            proof = tree.generate_proof(index)
        else:
            proof = tree.proof_for_data(_read_block(data_file))
    except HashTreeError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    doc = proof.to_json().decode("utf-8")
    if out is not None:
        out.write_text(doc)
        print(f"[green]Wrote proof for leaf {proof.leaf_index} to {out}[/green]")
    else:
        typer.echo(doc)


@app.command()
def verify(
    proof_path: pathlib.Path = typer.Argument(..., exists=True, dir_okay=False),
    data_file: Optional[pathlib.Path] = typer.Option(
        None, exists=True, dir_okay=False, help="Check this file is the proven leaf"
    ),
    root_hex: Optional[str] = typer.Option(None, "--root", help="Trusted root digest (hex)"),
):
    """Verify a proof document without the original tree."""
    try:
        doc = json.loads(proof_path.read_text())
    except ValueError:
        print("[red]proof file is not valid JSON[/red]")
        raise typer.Exit(code=1)

    expected_root = None
    if root_hex is not None:
        expected_root = parse_root(root_hex)
        if expected_root is None:
            raise typer.BadParameter("--root must be hex")

    if data_file is not None:
        ok = verify_data_against_document(_read_block(data_file), doc, expected_root)
    else:
        proof = load_proof(doc)
        ok = verify_proof(proof)
        if ok and expected_root is not None:
            ok = digest_equal(proof.root_hash, expected_root)
    print({"proof_valid": ok})
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def dump(files: List[pathlib.Path] = typer.Argument(..., exists=True, dir_okay=False)):
    """Print every level of the tree over FILES."""
    tree = _load_tree(files)
    tree.dump(sink=typer.echo)


@app.command()
def demo():
    """Build a four-transaction tree and walk a proof through verification."""
    tree = Tree(DEMO_BLOCKS)
    tree.dump(sink=typer.echo)
    proof = tree.proof_for_data(DEMO_BLOCKS[1])
    typer.echo(proof.describe())
    print(f"[cyan]Proof size[/cyan]: {proof.size()} bytes")
    print(f"[cyan]Proof valid[/cyan]: {verify_proof(proof)}")
    print(
        f"[cyan]Data bound[/cyan]: {tree.verify_data_against_proof(DEMO_BLOCKS[1], proof)}"
    )
    tree.append(b"Transaction 5: Alice -> Eve")
    print(
        f"[yellow]After append, old proof against tree[/yellow]: "
        f"{tree.verify_data_against_proof(DEMO_BLOCKS[1], proof)}"
    )


if __name__ == "__main__":
    app()
