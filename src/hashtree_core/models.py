from __future__ import annotations
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


def _check_hex(v: str) -> str:
    try:
        bytes.fromhex(v)
    except (TypeError, ValueError) as e:
        raise ValueError("value must be a hex string") from e
    return v.lower()


class ProofStepDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sibling_hash: StrictStr
    position: Literal["left", "right"]

    @field_validator("sibling_hash")
    @classmethod
    def _sibling_is_hex(cls, v: str) -> str:
        return _check_hex(v)


class ProofDocument(BaseModel):
    """Hex-encoded inclusion proof exchanged between the CLI and the SDK verifier.

    Field names mirror `Proof`; digests travel as lowercase hex so that the
    canonical JSON form is stable across producers.
    """

    model_config = ConfigDict(extra="forbid")

    leaf_index: StrictInt = Field(ge=0)
    leaf_hash: StrictStr
    root_hash: StrictStr
    path: List[ProofStepDocument] = Field(default_factory=list)

    @field_validator("leaf_hash", "root_hash")
    @classmethod
    def _hashes_are_hex(cls, v: str) -> str:
        return _check_hex(v)


class LeafInfo(BaseModel):
    index: int
    hash: str


class NodeInfo(BaseModel):
    position: int
    hash: str
    is_leaf: bool
    promoted: bool = False


class TreeInfo(BaseModel):
    root_hash: StrictStr
    leaf_count: int
    depth: int
    leaves: List[LeafInfo] = Field(default_factory=list)
    levels: List[List[NodeInfo]] = Field(default_factory=list)
