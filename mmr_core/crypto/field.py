"""
Module 02 - Field Hashing
Fixed-arity hashing over a prime field.

The engine only needs a collision-resistant keyed hash with a 2-ary and a
3-ary variant over field elements, plus conversions between 32-byte
digests and field elements. The construction is fixed end-to-end:

    leaf   = hash2(index, value)
    branch = hash3(index, left, right)
    bag    = hash2(size, fold(hash2, size, peaks))

Backends:
- Sha256FieldHasher (default): sha256(arity || e1 || ... || en) mod p
- Blake2bFieldHasher: same framing with BLAKE2b-256

Elements are framed as 32-byte big-endian integers and prefixed with the
arity byte, so a 2-ary and a 3-ary call can never share a preimage.
A Poseidon backend plugs in by subclassing FieldHasher.
"""
from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import Callable

from mmr_core.crypto.hashing import DIGEST_SIZE, ensure_digest
from mmr_core.schemas.errors import FieldElementException, UnknownHasherException


# Scalar field of the BN254 curve (the field Poseidon is usually instantiated over)
BN254_SCALAR_FIELD: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)


class FieldHasher(ABC):
    """
    Two- and three-argument hash over the integers modulo ``modulus``.

    Subclasses implement ``_compress``; arity checks, range checks and the
    bytes <-> field conversions live here.
    """

    name: str = "abstract"

    def __init__(self, modulus: int = BN254_SCALAR_FIELD) -> None:
        if modulus < 2 or modulus.bit_length() > DIGEST_SIZE * 8:
            raise FieldElementException(
                f"Field modulus must fit in {DIGEST_SIZE} bytes",
                details={"modulus": str(modulus)},
            )
        self.modulus = modulus

    @abstractmethod
    def _compress(self, elements: tuple[int, ...]) -> int:
        """Hash already range-checked elements to a field element."""

    def hash2(self, a: int, b: int) -> int:
        return self._compress(self._check(a, b))

    def hash3(self, a: int, b: int, c: int) -> int:
        return self._compress(self._check(a, b, c))

    def _check(self, *elements: int) -> tuple[int, ...]:
        for element in elements:
            if not 0 <= element < self.modulus:
                raise FieldElementException(
                    "Hash input is not a field element",
                    details={"element": str(element)},
                )
        return elements

    def reduce(self, digest: bytes) -> int:
        """Map an arbitrary 32-byte digest into the field (digest mod p)."""
        return int.from_bytes(ensure_digest(digest), "big") % self.modulus

    def to_field(self, data: bytes) -> int:
        """
        Decode a canonical field element.

        Unlike ``reduce``, values at or above the modulus are rejected so that
        every element has exactly one byte encoding.
        """
        value = int.from_bytes(ensure_digest(data), "big")
        if value >= self.modulus:
            raise FieldElementException(
                "Encoding is not a canonical field element",
                details={"value": "0x" + bytes(data).hex()},
            )
        return value

    def to_bytes(self, element: int) -> bytes:
        """Encode a field element as 32 big-endian bytes."""
        if not 0 <= element < self.modulus:
            raise FieldElementException(
                "Value is not a field element",
                details={"element": str(element)},
            )
        return element.to_bytes(DIGEST_SIZE, "big")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(modulus={self.modulus})"


class _HashlibFieldHasher(FieldHasher):
    """Frames elements for a hashlib constructor and reduces the digest mod p."""

    _factory: Callable[[], "hashlib._Hash"]

    def _compress(self, elements: tuple[int, ...]) -> int:
        h = self._factory()
        h.update(bytes([len(elements)]))
        for element in elements:
            h.update(element.to_bytes(DIGEST_SIZE, "big"))
        return int.from_bytes(h.digest(), "big") % self.modulus


class Sha256FieldHasher(_HashlibFieldHasher):
    name = "sha256"
    _factory = staticmethod(hashlib.sha256)


class Blake2bFieldHasher(_HashlibFieldHasher):
    name = "blake2b"
    _factory = staticmethod(lambda: hashlib.blake2b(digest_size=DIGEST_SIZE))


HASHERS: dict[str, type[FieldHasher]] = {
    Sha256FieldHasher.name: Sha256FieldHasher,
    Blake2bFieldHasher.name: Blake2bFieldHasher,
}

DEFAULT_HASHER = Sha256FieldHasher.name


def get_hasher(name: str = DEFAULT_HASHER, modulus: int | None = None) -> FieldHasher:
    """
    Resolve a hash backend by name.

    Raises:
        UnknownHasherException: If no backend is registered under ``name``
    """
    try:
        cls = HASHERS[name.lower()]
    except KeyError:
        raise UnknownHasherException(name, sorted(HASHERS)) from None
    if modulus is None:
        return cls()
    return cls(modulus)


__all__ = [
    "BN254_SCALAR_FIELD",
    "FieldHasher",
    "Sha256FieldHasher",
    "Blake2bFieldHasher",
    "HASHERS",
    "DEFAULT_HASHER",
    "get_hasher",
]
