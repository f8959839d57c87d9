"""
Core cryptographic utilities.

Module 02 provides byte hashing helpers and the field hashers that
instantiate the engine's 2-ary and 3-ary compression functions.
"""
from .hashing import (
    DIGEST_SIZE,
    ZERO_HASH,
    sha256,
    ensure_digest,
    to_hex,
    from_hex,
    digest_from_hex,
)
from .field import (
    BN254_SCALAR_FIELD,
    DEFAULT_HASHER,
    HASHERS,
    FieldHasher,
    Sha256FieldHasher,
    Blake2bFieldHasher,
    get_hasher,
)

__all__ = [
    "DIGEST_SIZE",
    "ZERO_HASH",
    "sha256",
    "ensure_digest",
    "to_hex",
    "from_hex",
    "digest_from_hex",
    "BN254_SCALAR_FIELD",
    "DEFAULT_HASHER",
    "HASHERS",
    "FieldHasher",
    "Sha256FieldHasher",
    "Blake2bFieldHasher",
    "get_hasher",
]
