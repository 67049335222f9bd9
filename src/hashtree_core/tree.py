from __future__ import annotations
import logging
from typing import Callable, Iterable, List, Optional, Sequence

from .crypto import HEX, digest_equal, sha256
from .errors import DataNotFoundError, EmptyInputError, IndexOutOfRangeError
from .models import LeafInfo, NodeInfo, TreeInfo
from .node import HashNode, as_block
from .proof import Proof, generate_proof, verify_proof
from .settings import settings

logger = logging.getLogger(__name__)


def build_levels(leaves: Sequence[HashNode]) -> List[List[HashNode]]:
    """Pairwise-combine `leaves` level by level until one node remains.

    An odd node out at the end of a level is promoted: it is wrapped in an
    internal node with no right child, which keeps its digest unchanged.
    """
    lvl = list(leaves)
    levels = [lvl]
    while len(lvl) > 1:
        nxt = []
        for i in range(0, len(lvl), 2):
            right = lvl[i + 1] if i + 1 < len(lvl) else None
            nxt.append(HashNode.new_internal(lvl[i], right))
        levels.append(nxt)
        lvl = nxt
    return levels


class Tree:
    """Hash tree over an ordered, non-empty sequence of data blocks.

    The tree is rebuilt from scratch on every mutation. It is not safe to
    read from one thread while another calls `rebuild` or `append`.
    """

    def __init__(self, blocks: Iterable[bytes]):
        self.leaves: List[HashNode] = []
        self._levels: List[List[HashNode]] = []
        self.rebuild(blocks)

    @classmethod
    def build(cls, blocks: Iterable[bytes]) -> "Tree":
        return cls(blocks)

    def rebuild(self, blocks: Iterable[bytes]) -> None:
        blocks = [as_block(b) for b in blocks]
        if not blocks:
            raise EmptyInputError()
        leaves = [HashNode.new_leaf(b) for b in blocks]
        self._levels = build_levels(leaves)
        self.leaves = leaves
        logger.debug(
            "built tree: leaves=%d depth=%d root=%s",
            len(leaves),
            len(self._levels),
            HEX(self._levels[-1][0].digest),
        )

    def append(self, block: bytes) -> int:
        """Add one block at the end and rebuild; returns the new leaf index."""
        blocks = [leaf.raw_data for leaf in self.leaves]
        blocks.append(as_block(block))
        self.rebuild(blocks)
        return len(self.leaves) - 1

    @property
    def levels(self) -> List[List[HashNode]]:
        return [list(level) for level in self._levels]

    @property
    def root_node(self) -> Optional[HashNode]:
        if not self._levels:
            return None
        return self._levels[-1][0]

    def root(self) -> Optional[bytes]:
        node = self.root_node
        return node.digest if node is not None else None

    def leaf(self, index: int) -> HashNode:
        if index < 0 or index >= len(self.leaves):
            raise IndexOutOfRangeError(index, len(self.leaves))
        return self.leaves[index]

    def leaf_count(self) -> int:
        return len(self.leaves)

    def depth(self) -> int:
        return len(self._levels)

    def __len__(self) -> int:
        return len(self.leaves)

    # -- lookup -----------------------------------------------------------

    def index_of(self, data: bytes) -> Optional[int]:
        """Position of the first leaf whose digest equals H(data)."""
        target = sha256(as_block(data))
        for i, leaf in enumerate(self.leaves):
            if digest_equal(leaf.digest, target):
                return i
        return None

    def contains_data(self, data: bytes) -> bool:
        try:
            return self.index_of(data) is not None
        except TypeError:
            return False

    def generate_proof(self, index: int) -> Proof:
        return generate_proof(self._levels, self.root(), index)

    def proof_for_data(self, data: bytes) -> Proof:
        idx = self.index_of(data)
        if idx is None:
            logger.debug("no leaf matches %s", HEX(sha256(as_block(data))))
            raise DataNotFoundError()
        return self.generate_proof(idx)

    # -- verification ------------------------------------------------------

    def verify_data_against_proof(self, data: bytes, proof: Optional[Proof]) -> bool:
        """Bind `data` to `proof` and check the proof targets this tree's current root."""
        if proof is None:
            return False
        try:
            if not digest_equal(sha256(as_block(data)), proof.leaf_hash):
                return False
            if not digest_equal(self.root(), proof.root_hash):
                return False
        except (AttributeError, TypeError, ValueError) as e:
            logger.debug("malformed proof rejected: %s", e)
            return False
        return verify_proof(proof)

    # -- diagnostics -------------------------------------------------------

    def dump(self, sink: Optional[Callable[[str], None]] = None) -> None:
        """Write each level's node summaries and the root digest to `sink`.

        Defaults to this module's logger at INFO.
        """
        if sink is None:
            sink = logger.info
        width = settings.dump_hash_bytes
        sink("Hash Tree Structure:")
        for n, level in enumerate(self._levels):
            sink(f"Level {n}: " + " | ".join(node.summary(width) for node in level))
        root = self.root()
        sink(f"Root Hash: {HEX(root) if root is not None else '-'}")

    def info(self) -> TreeInfo:
        return TreeInfo(
            root_hash=HEX(self.root() or b""),
            leaf_count=self.leaf_count(),
            depth=self.depth(),
            leaves=[
                LeafInfo(index=i, hash=HEX(leaf.digest))
                for i, leaf in enumerate(self.leaves)
            ],
            levels=[
                [
                    NodeInfo(
                        position=i,
                        hash=HEX(node.digest),
                        is_leaf=node.is_leaf,
                        promoted=node.is_promoted,
                    )
                    for i, node in enumerate(level)
                ]
                for level in self._levels
            ],
        )


def build(blocks: Iterable[bytes]) -> Tree:
    return Tree.build(blocks)
