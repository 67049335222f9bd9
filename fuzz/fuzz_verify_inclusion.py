"""Inclusion proof fuzzing with mutated proofs and proof documents."""
from __future__ import annotations
import atheris
import dataclasses
import json
import sys
import random

with atheris.instrument_imports():
    from hashtree_core.proof import ProofStep, verify_proof
    from hashtree_core.tree import Tree
    from hashtree_sdk.verify import verify_proof_document


def TestOneInput(data: bytes):  # noqa: N802
    if len(data) < 8:
        return
    # Derive variable chunk size & mutation seed
    seed = int.from_bytes(data[:4], 'little')
    random.seed(seed)
    chunk_len = 1 + (data[4] % 32)
    body = data[5:]
    blocks = [body[i:i+chunk_len] for i in range(0, min(len(body), chunk_len * 16), chunk_len)]
    if len(blocks) < 3:
        return
    tree = Tree(blocks)
    idx = seed % len(blocks)
    proof = tree.generate_proof(idx)
    # With some probability, mutate one sibling to exercise negative path
    if random.random() < 0.2 and proof.path:
        k = random.randrange(len(proof.path))
        step = proof.path[k]
        mutated = bytes([(step.sibling_hash[0] ^ 0x01)]) + step.sibling_hash[1:]
        path = list(proof.path)
        path[k] = ProofStep(mutated, step.position)
        if verify_proof(dataclasses.replace(proof, path=tuple(path))):
            raise RuntimeError("tampered proof unexpectedly verified")
    else:
        if not verify_proof(proof):
            raise RuntimeError("valid proof failed")

    # Arbitrary bytes as a proof document must never raise
    try:
        doc = json.loads(body.decode("utf-8", "ignore"))
    except ValueError:
        return
    if isinstance(doc, dict):
        verify_proof_document(doc)


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
