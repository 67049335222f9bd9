from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .crypto import combine, digest_equal, sha256


def as_block(data) -> bytes:
    """Copy a bytes-like block; anything else is a TypeError rather than coerced."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"data block must be bytes-like, not {type(data).__name__}")
    return bytes(data)


@dataclass(frozen=True, eq=False)
class HashNode:
    """One node of the hash tree.

    Leaves carry the raw block they were hashed from. Internal nodes own their
    children; a node holding a single child is a promotion and carries that
    child's digest unchanged.
    """

    digest: bytes
    is_leaf: bool = False
    raw_data: Optional[bytes] = field(default=None, repr=False)
    left: Optional["HashNode"] = field(default=None, repr=False)
    right: Optional["HashNode"] = field(default=None, repr=False)

    @classmethod
    def new_leaf(cls, data: bytes) -> "HashNode":
        data = as_block(data)
        return cls(digest=sha256(data), is_leaf=True, raw_data=data)

    @classmethod
    def new_internal(
        cls, left: Optional["HashNode"], right: Optional["HashNode"] = None
    ) -> "HashNode":
        if left is not None and right is not None:
            digest = combine(left.digest, right.digest)
        elif left is not None:
            digest = left.digest
        elif right is not None:
            digest = right.digest
        else:
            raise ValueError("internal node needs at least one child")
        return cls(digest=digest, left=left, right=right)

    @property
    def is_promoted(self) -> bool:
        return not self.is_leaf and (self.left is None or self.right is None)

    def summary(self, width: int = 8) -> str:
        kind = "Leaf" if self.is_leaf else "Internal"
        return f"{kind}[{self.digest[:width].hex()}]"

    def __eq__(self, other) -> bool:
        if not isinstance(other, HashNode):
            return NotImplemented
        return digest_equal(self.digest, other.digest)

    def __hash__(self) -> int:
        return hash(self.digest)


def nodes_equal(a: Optional[HashNode], b: Optional[HashNode]) -> bool:
    """Digest equality where two absent nodes match and absent never matches present."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return a == b
