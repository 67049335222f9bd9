import json

from hashtree_core.tree import Tree
from hashtree_sdk.verify import (
    load_proof,
    parse_root,
    verify_data_against_document,
    verify_proof_document,
)


def _doc(tree: Tree, index: int) -> dict:
    return json.loads(tree.generate_proof(index).to_json())


def test_valid_document(four_blocks):
    tree = Tree(four_blocks)
    for i in range(4):
        assert verify_proof_document(_doc(tree, i))


def test_tampered_document(four_blocks):
    doc = _doc(Tree(four_blocks), 1)
    h = doc["path"][0]["sibling_hash"]
    doc["path"][0]["sibling_hash"] = ("0" if h[0] != "0" else "1") + h[1:]
    assert not verify_proof_document(doc)


def test_invalid_documents_are_rejected(four_blocks):
    doc = _doc(Tree(four_blocks), 0)
    assert load_proof({}) is None
    assert not verify_proof_document({})
    assert not verify_proof_document({**doc, "leaf_hash": "zz"})
    assert not verify_proof_document({**doc, "leaf_index": -1})
    assert not verify_proof_document({**doc, "extra": 1})
    bad_path = [{"sibling_hash": doc["path"][0]["sibling_hash"], "position": "up"}]
    assert not verify_proof_document({**doc, "path": bad_path})


def test_data_against_document(four_blocks):
    tree = Tree(four_blocks)
    doc = _doc(tree, 2)
    assert verify_data_against_document(b"data3", doc)
    assert verify_data_against_document(b"data3", doc, expected_root=tree.root())
    assert not verify_data_against_document(b"data2", doc)
    assert not verify_data_against_document(b"data3", doc, expected_root=b"\x00" * 32)
    assert not verify_data_against_document(b"data3", {"bogus": True})


def test_parse_root():
    assert parse_root("00ff") == b"\x00\xff"
    assert parse_root("xyz") is None


def test_non_bytes_data_against_document(four_blocks):
    doc = _doc(Tree(four_blocks), 2)
    assert not verify_data_against_document("data3", doc)
