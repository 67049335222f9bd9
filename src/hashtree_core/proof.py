from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .crypto import HEX, HEXD, combine, digest_equal, jcs_dumps
from .errors import IndexOutOfRangeError
from .models import ProofDocument, ProofStepDocument
from .node import HashNode

logger = logging.getLogger(__name__)

# Bytes used for the leaf index and for each position tag in the
# canonical serialized proof size.
INDEX_SIZE = 4
POSITION_SIZE = 1


class Position(str, enum.Enum):
    """Side of the running hash on which a sibling digest is placed."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    sibling_hash: bytes
    position: Position


@dataclass(frozen=True)
class Proof:
    """Snapshot inclusion proof for one leaf.

    Carries the leaf and root digests as they were when generated; it holds
    no reference to the tree, so a later rebuild is only detectable by
    comparing `root_hash` against the tree's current root.
    """

    leaf_index: int
    leaf_hash: bytes
    root_hash: bytes
    path: Tuple[ProofStep, ...] = ()

    def size(self) -> int:
        """Canonical serialized size in bytes."""
        n = len(self.leaf_hash) + len(self.root_hash) + INDEX_SIZE
        for step in self.path:
            n += len(step.sibling_hash) + POSITION_SIZE
        return n

    def describe(self) -> str:
        lines = [
            f"Inclusion proof for leaf {self.leaf_index}:",
            f"Leaf Hash: {HEX(self.leaf_hash)}",
            f"Root Hash: {HEX(self.root_hash)}",
            "Proof Path:",
        ]
        for i, step in enumerate(self.path, start=1):
            lines.append(f"  {i}. {step.position.value}: {HEX(step.sibling_hash)}")
        return "\n".join(lines)

    def to_document(self) -> ProofDocument:
        return ProofDocument(
            leaf_index=self.leaf_index,
            leaf_hash=HEX(self.leaf_hash),
            root_hash=HEX(self.root_hash),
            path=[
                ProofStepDocument(
                    sibling_hash=HEX(s.sibling_hash), position=s.position.value
                )
                for s in self.path
            ],
        )

    def to_json(self) -> bytes:
        """RFC 8785 canonical JSON of the proof document."""
        return jcs_dumps(self.to_document().model_dump())

    @classmethod
    def from_document(cls, doc: ProofDocument) -> "Proof":
        return cls(
            leaf_index=doc.leaf_index,
            leaf_hash=HEXD(doc.leaf_hash),
            root_hash=HEXD(doc.root_hash),
            path=tuple(
                ProofStep(HEXD(s.sibling_hash), Position(s.position)) for s in doc.path
            ),
        )


def generate_proof(
    levels: Sequence[Sequence[HashNode]], root_hash: bytes, leaf_index: int
) -> Proof:
    """Collect the sibling digests from leaf `leaf_index` up to the level below the root.

    Levels where the ancestor was promoted without a sibling contribute no
    step, so proofs through promoted nodes are shorter than depth - 1.
    """
    leaves = levels[0] if levels else ()
    if leaf_index < 0 or leaf_index >= len(leaves):
        raise IndexOutOfRangeError(leaf_index, len(leaves))

    path = []
    idx = leaf_index
    for level in levels[:-1]:
        if idx % 2 == 0:
            sibling_idx, position = idx + 1, Position.RIGHT
        else:
            sibling_idx, position = idx - 1, Position.LEFT
        if sibling_idx < len(level):
            path.append(ProofStep(level[sibling_idx].digest, position))
        idx //= 2

    return Proof(
        leaf_index=leaf_index,
        leaf_hash=leaves[leaf_index].digest,
        root_hash=root_hash,
        path=tuple(path),
    )


def _replay(leaf_hash: bytes, path: Sequence[ProofStep]) -> Optional[bytes]:
    h = bytes(leaf_hash)
    for step in path:
        sibling = step.sibling_hash
        if not isinstance(sibling, (bytes, bytearray)):
            return None
        position = Position(step.position)
        if position is Position.LEFT:
            h = combine(bytes(sibling), h)
        else:
            h = combine(h, bytes(sibling))
    return h


def verify_proof(proof: Optional[Proof]) -> bool:
    """Replay `proof.path` from the leaf hash and compare with `proof.root_hash`.

    Never raises: an absent proof, a malformed path or a mismatch is False.
    """
    if proof is None:
        return False
    try:
        if not isinstance(proof.leaf_hash, (bytes, bytearray)):
            return False
        computed = _replay(proof.leaf_hash, proof.path)
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug("malformed proof rejected: %s", e)
        return False
    if computed is None:
        return False
    return digest_equal(computed, proof.root_hash)
