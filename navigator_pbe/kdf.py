"""
PBE Key Derivation — PBKDF2-HMAC (RFC 8018, section 5.2).

PBKDF2 is computed here block by block instead of through
``cryptography``'s ``PBKDF2HMAC`` so that any hash of the catalog (MD5, the
SHA-2 and SHA-3 families) can serve as the PRF with the exact same output the
stored artifacts were derived with.

Security Note:
    Never log passwords or derived keys.
"""
import struct
import logging
from dataclasses import dataclass
from typing import Union

from cryptography.hazmat.primitives import hmac

from .algorithms import CipherId, HashId
from .catalog import cipher_spec, hash_spec
from .exceptions import ConfigurationError
from . import backend

logger = logging.getLogger("navigator.pbe")


# ---------------------------------------------------------------------------
# Derived keys
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SingleKey:
    """Key material used as one contiguous key."""

    key: bytes

    def __repr__(self) -> str:
        return f"SingleKey(<{len(self.key)} bytes>)"


@dataclass(frozen=True)
class TripleSplitKey:
    """Key material of a triple-key cipher, as three equal sub-keys."""

    k1: bytes
    k2: bytes
    k3: bytes

    def __repr__(self) -> str:
        return f"TripleSplitKey(<3 x {len(self.k1)} bytes>)"

    @property
    def parts(self) -> tuple[bytes, bytes, bytes]:
        return self.k1, self.k2, self.k3


DerivedKey = Union[SingleKey, TripleSplitKey]


# ---------------------------------------------------------------------------
# PBKDF2
# ---------------------------------------------------------------------------

def _to_bytes(value: Union[str, bytes, bytearray, memoryview]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _mac(prf: hmac.HMAC, data: bytes) -> bytes:
    """Run one HMAC over ``data`` from a pre-keyed context."""
    ctx = prf.copy()
    ctx.update(data)
    return ctx.finalize()


def _xor_sum(prf: hmac.HMAC, salt: bytes, iterations: int, index: int) -> bytes:
    """Compute block ``T_index = U_1 ^ U_2 ^ ... ^ U_c``."""
    u = _mac(prf, salt + struct.pack("!I", index))
    acc = int.from_bytes(u, "big")
    for _ in range(iterations - 1):
        u = _mac(prf, u)
        acc ^= int.from_bytes(u, "big")
    return acc.to_bytes(len(u), "big")


def check_iterations(iterations: int) -> int:
    """Return ``iterations`` if it is an int of at least 1.

    Raises:
        ConfigurationError: Otherwise (``bool`` included).
    """
    if isinstance(iterations, bool) or not isinstance(iterations, int) or iterations < 1:
        raise ConfigurationError(
            f"Iteration count must be a positive integer, got {iterations!r}"
        )
    return iterations


def pbkdf2(
    password: Union[str, bytes],
    salt: Union[str, bytes],
    iterations: int,
    key_length: int,
    hash_id: Union[HashId, str],
) -> bytes:
    """Derive ``key_length`` bytes from a password with PBKDF2-HMAC.

    Args:
        password: Passphrase; ``str`` is UTF-8 encoded.
        salt: Salt bytes; ``str`` is UTF-8 encoded.
        iterations: Iteration count ``c``, at least 1.
        key_length: Desired output length ``dkLen``, at least 1.
        hash_id: Hash selecting the HMAC variant.

    Returns:
        Exactly ``key_length`` bytes. Identical inputs give identical output.

    Raises:
        ConfigurationError: On an unknown hash or non-positive parameters.
    """
    check_iterations(iterations)
    if isinstance(key_length, bool) or not isinstance(key_length, int) or key_length < 1:
        raise ConfigurationError(
            f"Key length must be a positive integer, got {key_length!r}"
        )
    spec = hash_spec(hash_id)
    prf = backend.new_hmac(spec.hash, _to_bytes(password))
    salt = _to_bytes(salt)

    num_blocks = -(-key_length // spec.digest_size)
    derived = b"".join(
        _xor_sum(prf, salt, iterations, index)
        for index in range(1, num_blocks + 1)
    )
    return derived[:key_length]


# ---------------------------------------------------------------------------
# Key finishing
# ---------------------------------------------------------------------------

def split_key(cipher: Union[CipherId, str], material: bytes) -> DerivedKey:
    """Shape raw key material for ``cipher``.

    Triple-key ciphers get three equal contiguous sub-keys; every other
    cipher uses the material as a single key.
    """
    spec = cipher_spec(cipher)
    if not spec.multi_key_split:
        return SingleKey(material)
    size = len(material) // 3
    if size * 3 != len(material):
        raise ConfigurationError(
            f"{spec.cipher} needs key material divisible in three, "
            f"got {len(material)} bytes"
        )
    return TripleSplitKey(
        material[:size], material[size:2 * size], material[2 * size:]
    )


def make_key(
    cipher: Union[CipherId, str],
    hash_id: Union[HashId, str],
    iterations: int,
    passphrase: Union[str, bytes],
    salt: bytes,
) -> DerivedKey:
    """Derive the cipher key for one artifact from a passphrase and its salt.

    Raises:
        ConfigurationError: On unknown identifiers or invalid iterations.
    """
    spec = cipher_spec(cipher)
    material = pbkdf2(passphrase, salt, iterations, spec.key_length, hash_id)
    logger.debug(
        "Derived %d-byte key for %s (hash=%s, iterations=%d)",
        spec.key_length, spec.cipher, hash_id, iterations,
    )
    return split_key(spec.cipher, material)
