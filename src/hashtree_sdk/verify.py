from typing import Any, Dict, Optional

from pydantic import ValidationError

from hashtree_core.crypto import HEXD, digest_equal, sha256
from hashtree_core.models import ProofDocument
from hashtree_core.proof import Proof, verify_proof


def load_proof(doc: Dict[str, Any]) -> Optional[Proof]:
    """Parse a proof document; None if it does not validate."""
    try:
        return Proof.from_document(ProofDocument.model_validate(doc))
    except (ValidationError, ValueError, TypeError):
        return None


def verify_proof_document(doc: Dict[str, Any]) -> bool:
    """Return True if the document's path replays from its leaf hash to its root hash.

    No tree is needed. This only shows the proof is self-consistent; callers
    should also compare `root_hash` with a root they trust.
    """
    return verify_proof(load_proof(doc))


def verify_data_against_document(
    data: bytes, doc: Dict[str, Any], expected_root: Optional[bytes] = None
) -> bool:
    """Verify that `data` is the proven leaf and, if given, that the proof targets `expected_root`."""
    proof = load_proof(doc)
    if proof is None or not isinstance(data, (bytes, bytearray, memoryview)):
        return False
    if not digest_equal(sha256(bytes(data)), proof.leaf_hash):
        return False
    if expected_root is not None and not digest_equal(expected_root, proof.root_hash):
        return False
    return verify_proof(proof)


def parse_root(root_hex: str) -> Optional[bytes]:
    try:
        return HEXD(root_hex)
    except ValueError:
        return None
