import dataclasses
import json

import pytest

from hashtree_core.errors import IndexOutOfRangeError
from hashtree_core.models import ProofDocument
from hashtree_core.proof import Position, Proof, ProofStep, verify_proof
from hashtree_core.tree import Tree


def _flip(b: bytes, i: int = 0) -> bytes:
    return b[:i] + bytes([b[i] ^ 0x01]) + b[i + 1 :]


def test_every_leaf_verifies(blocks_of):
    for n in range(1, 18):
        tree = Tree(blocks_of(n))
        for i in range(n):
            proof = tree.generate_proof(i)
            assert proof.leaf_index == i
            assert proof.root_hash == tree.root()
            assert verify_proof(proof), (n, i)


def test_four_leaf_scenario(four_blocks):
    tree = Tree(four_blocks)
    proof = tree.generate_proof(1)
    assert len(proof.path) == 2
    assert proof.path[0].position is Position.LEFT
    assert proof.path[0].sibling_hash == tree.leaf(0).digest
    assert proof.path[1].position is Position.RIGHT
    assert verify_proof(proof)
    assert tree.verify_data_against_proof(b"data2", proof)
    assert not tree.verify_data_against_proof(b"wrong data", proof)


def test_promoted_leaf_has_shorter_path():
    tree = Tree([b"data1", b"data2", b"data3"])
    proof = tree.generate_proof(2)
    assert len(proof.path) == 1
    assert proof.path[0].position is Position.LEFT
    assert verify_proof(proof)
    assert len(tree.generate_proof(0).path) == 2


def test_single_leaf_proof_is_empty():
    tree = Tree([b"only"])
    proof = tree.generate_proof(0)
    assert proof.path == ()
    assert proof.leaf_hash == proof.root_hash
    assert verify_proof(proof)


def test_index_out_of_range(four_blocks):
    tree = Tree(four_blocks)
    with pytest.raises(IndexOutOfRangeError):
        tree.generate_proof(-1)
    with pytest.raises(IndexOutOfRangeError):
        tree.generate_proof(4)


def test_none_proof_fails():
    assert verify_proof(None) is False


@pytest.mark.parametrize("byte_index", [0, 17, 31])
def test_tampering_breaks_proof(blocks_of, byte_index):
    tree = Tree(blocks_of(7))
    proof = tree.generate_proof(3)
    assert verify_proof(proof)

    assert not verify_proof(
        dataclasses.replace(proof, leaf_hash=_flip(proof.leaf_hash, byte_index))
    )
    assert not verify_proof(
        dataclasses.replace(proof, root_hash=_flip(proof.root_hash, byte_index))
    )
    for k, step in enumerate(proof.path):
        path = list(proof.path)
        path[k] = ProofStep(_flip(step.sibling_hash, byte_index), step.position)
        assert not verify_proof(dataclasses.replace(proof, path=tuple(path)))


def test_swapped_position_fails(four_blocks):
    proof = Tree(four_blocks).generate_proof(1)
    first = proof.path[0]
    path = (ProofStep(first.sibling_hash, Position.RIGHT),) + proof.path[1:]
    assert not verify_proof(dataclasses.replace(proof, path=path))


def test_malformed_proofs_return_false(four_blocks):
    proof = Tree(four_blocks).generate_proof(0)
    assert not verify_proof(dataclasses.replace(proof, path=None))
    assert not verify_proof(
        dataclasses.replace(proof, path=(ProofStep(b"\x00" * 32, "up"),))
    )
    assert not verify_proof(
        dataclasses.replace(proof, path=(ProofStep("not-bytes", Position.LEFT),))
    )
    assert not verify_proof(dataclasses.replace(proof, leaf_hash=None))
    assert not verify_proof(dataclasses.replace(proof, root_hash=None))


def test_stale_proof_detected_by_root(four_blocks):
    tree = Tree(four_blocks)
    proof = tree.generate_proof(1)
    tree.rebuild([b"data1", b"data2", b"data3"])
    # still self-consistent, but no longer for this tree
    assert verify_proof(proof)
    assert not tree.verify_data_against_proof(b"data2", proof)


def test_proof_size():
    tree = Tree([b"Block A", b"Block B", b"Block C", b"Block D"])
    assert tree.generate_proof(1).size() == 134
    assert Tree([b"only"]).generate_proof(0).size() == 68


def test_describe_lists_path(four_blocks):
    proof = Tree(four_blocks).generate_proof(2)
    text = proof.describe()
    assert text.startswith("Inclusion proof for leaf 2:")
    assert "  1. right: " in text
    assert "  2. left: " in text


def test_document_round_trip(four_blocks):
    proof = Tree(four_blocks).generate_proof(3)
    doc = json.loads(proof.to_json())
    assert doc["leaf_index"] == 3
    assert doc["path"][0]["position"] == "left"
    again = Proof.from_document(ProofDocument.model_validate(doc))
    assert again == proof
    assert verify_proof(again)


def test_canonical_json_is_stable(four_blocks):
    a = Tree(four_blocks).generate_proof(0).to_json()
    b = Tree(list(four_blocks)).generate_proof(0).to_json()
    assert a == b
    assert b" " not in a
