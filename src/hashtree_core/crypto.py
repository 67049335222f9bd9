from __future__ import annotations
import hashlib
import hmac

import rfc8785

DIGEST_SIZE = hashlib.sha256().digest_size


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def combine(left: bytes, right: bytes) -> bytes:
    """Hash of two child digests concatenated with no prefix or separator."""
    return sha256(left + right)


def digest_equal(a, b) -> bool:
    """Constant-time byte comparison; None or non-bytes never match."""
    if not isinstance(a, (bytes, bytearray)) or not isinstance(b, (bytes, bytearray)):
        return False
    return hmac.compare_digest(bytes(a), bytes(b))


def HEX(b: bytes) -> str:
    return bytes(b).hex()


def HEXD(s: str) -> bytes:
    """Decode a hex string to bytes with strict validation."""
    try:
        return bytes.fromhex(s)
    except (TypeError, ValueError) as e:
        raise ValueError("invalid hex") from e


def jcs_dumps(obj) -> bytes:
    """Deterministic canonical JSON bytes per RFC8785."""
    return rfc8785.dumps(obj)
