"""
PBE Catalog — Cipher and hash metadata, denylists and default parameters.

The tables below are static: the Python ``cryptography`` API does not expose
OpenSSL's ``EVP_CIPHER_iv_length``/``EVP_CIPHER_key_length``/
``EVP_CIPHER_block_size`` for every legacy cipher, and artifacts must keep the
exact sizes they were written with.

Block sizes:
    ``aes_cbc``, ``aes_cbc128``, ``aes_cbc256`` and ``aes_ige256`` use a
    block size of 32 bytes, although AES works on 16-byte blocks. The value
    only drives padding (32 is a multiple of 16, so CBC still works) and is
    kept so artifacts stay length-identical with the ones already stored.
    Changing it is a format change.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Union

from .algorithms import CipherId, HashId
from .exceptions import ConfigurationError
from . import backend

SALT_LENGTH = 16


@dataclass(frozen=True)
class CipherSpec:
    """Sizes, in bytes, that a cipher imposes on an artifact."""

    cipher: CipherId
    iv_length: int
    key_length: int
    block_size: int
    multi_key_split: bool = False


@dataclass(frozen=True)
class HashSpec:
    """HMAC output length of a hash, in bytes."""

    hash: HashId
    digest_size: int


def _ciphers(*specs: CipherSpec) -> Mapping[CipherId, CipherSpec]:
    return MappingProxyType({spec.cipher: spec for spec in specs})


def _hashes(*specs: HashSpec) -> Mapping[HashId, HashSpec]:
    return MappingProxyType({spec.hash: spec for spec in specs})


CIPHERS: Mapping[CipherId, CipherSpec] = _ciphers(
    CipherSpec(CipherId.DES_CBC, iv_length=8, key_length=8, block_size=8),
    CipherSpec(CipherId.DES_CFB, iv_length=8, key_length=8, block_size=8),
    CipherSpec(CipherId.DES3_CBC, 8, 24, 8, multi_key_split=True),
    CipherSpec(CipherId.DES3_CFB, 8, 24, 8, multi_key_split=True),
    CipherSpec(CipherId.DES_EDE3, 8, 24, 8, multi_key_split=True),
    CipherSpec(CipherId.BLOWFISH_CBC, iv_length=8, key_length=16, block_size=8),
    CipherSpec(CipherId.BLOWFISH_CFB64, iv_length=8, key_length=16, block_size=8),
    CipherSpec(CipherId.BLOWFISH_OFB64, iv_length=8, key_length=16, block_size=8),
    CipherSpec(CipherId.RC2_CBC, iv_length=8, key_length=16, block_size=8),
    CipherSpec(CipherId.AES_CBC, iv_length=16, key_length=16, block_size=32),
    CipherSpec(CipherId.AES_CBC128, iv_length=16, key_length=16, block_size=32),
    CipherSpec(CipherId.AES_CFB8, iv_length=16, key_length=16, block_size=8),
    CipherSpec(CipherId.AES_CFB128, iv_length=16, key_length=16, block_size=8),
    CipherSpec(CipherId.AES_CBC256, iv_length=16, key_length=32, block_size=32),
    CipherSpec(CipherId.AES_IGE256, iv_length=32, key_length=16, block_size=32),
)

HASHES: Mapping[HashId, HashSpec] = _hashes(
    HashSpec(HashId.MD4, 16),
    HashSpec(HashId.MD5, 16),
    HashSpec(HashId.SHA, 20),
    HashSpec(HashId.SHA224, 28),
    HashSpec(HashId.SHA256, 32),
    HashSpec(HashId.SHA384, 48),
    HashSpec(HashId.SHA512, 64),
    HashSpec(HashId.SHA3_224, 28),
    HashSpec(HashId.SHA3_256, 32),
    HashSpec(HashId.SHA3_384, 48),
    HashSpec(HashId.SHA3_512, 64),
)

# No slot for a tag/AEAD nonce (GCM), no IV (ECB), stream-only (CTR, RC4).
UNSUPPORTED_CIPHERS = frozenset({
    CipherId.AES_CTR,
    CipherId.AES_ECB,
    CipherId.DES_ECB,
    CipherId.BLOWFISH_ECB,
    CipherId.RC4,
    CipherId.AES_GCM,
})

UNSUPPORTED_HASHES = frozenset({HashId.MD4, HashId.RIPEMD160})

# Keep in sync with PBEConfig defaults.
DEFAULT_CIPHER = CipherId.AES_CBC256
DEFAULT_HASH = HashId.SHA512
DEFAULT_ITERATIONS = 1000


# ---------------------------------------------------------------------------
# Supported sets and defaults
# ---------------------------------------------------------------------------

def supported_ciphers() -> set[CipherId]:
    """Ciphers reported by the cryptography backend, minus the denylist."""
    return backend.reported_ciphers() - UNSUPPORTED_CIPHERS


def supported_hashes() -> set[HashId]:
    """Hashes reported by the cryptography backend, minus the denylist."""
    return backend.reported_hashes() - UNSUPPORTED_HASHES


def default_cipher() -> CipherId:
    return DEFAULT_CIPHER


def default_hash() -> HashId:
    return DEFAULT_HASH


def default_iterations() -> int:
    return DEFAULT_ITERATIONS


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def resolve_cipher(cipher: Union[CipherId, str]) -> CipherId:
    """Return the CipherId for an identifier or its legacy name.

    Raises:
        ConfigurationError: If the identifier is unknown.
    """
    try:
        return CipherId(cipher)
    except ValueError:
        raise ConfigurationError(f"Unknown cipher: {cipher!r}") from None


def resolve_hash(hash_id: Union[HashId, str]) -> HashId:
    """Return the HashId for an identifier or its legacy name.

    Raises:
        ConfigurationError: If the identifier is unknown.
    """
    try:
        return HashId(hash_id)
    except ValueError:
        raise ConfigurationError(f"Unknown hash: {hash_id!r}") from None


def cipher_spec(cipher: Union[CipherId, str]) -> CipherSpec:
    """Return the metadata of a cipher.

    Raises:
        ConfigurationError: If the cipher is unknown or excluded from use.
    """
    cipher = resolve_cipher(cipher)
    try:
        return CIPHERS[cipher]
    except KeyError:
        raise ConfigurationError(
            f"Cipher {cipher} is not supported for password-based encryption"
        ) from None


def hash_spec(hash_id: Union[HashId, str]) -> HashSpec:
    """Return the metadata of a hash.

    Raises:
        ConfigurationError: If the hash is unknown or has no known length.
    """
    hash_id = resolve_hash(hash_id)
    try:
        return HASHES[hash_id]
    except KeyError:
        raise ConfigurationError(
            f"Hash {hash_id} is not supported for key derivation"
        ) from None


def iv_length(cipher: Union[CipherId, str]) -> int:
    return cipher_spec(cipher).iv_length


def key_length(cipher: Union[CipherId, str]) -> int:
    return cipher_spec(cipher).key_length


def block_size(cipher: Union[CipherId, str]) -> int:
    return cipher_spec(cipher).block_size


def hash_length(hash_id: Union[HashId, str]) -> int:
    return hash_spec(hash_id).digest_size
