"""Fuzz harness for tree construction & inclusion proof verification."""
from __future__ import annotations
import atheris
import sys

with atheris.instrument_imports():
    from hashtree_core.proof import verify_proof
    from hashtree_core.tree import Tree


def TestOneInput(data: bytes):  # noqa: N802
    if not data:
        return
    # Fixed-size chunks keep the leaf count bounded.
    size = max(1, min(32, data[0]))
    chunks = [data[i : i + size] for i in range(1, min(len(data), 1 + size * 32), size)]
    if not chunks:
        return
    tree = Tree(chunks)
    if len(tree.levels[-1]) != 1:
        raise RuntimeError("top level must hold exactly the root")
    idx = data[-1] % len(chunks)
    proof = tree.generate_proof(idx)
    if len(proof.path) > tree.depth() - 1:
        raise RuntimeError("proof longer than tree height")
    if not verify_proof(proof):
        raise RuntimeError("valid inclusion proof failed")
    if not tree.verify_data_against_proof(chunks[idx], proof):
        raise RuntimeError("data-bound verification failed")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
