"""
PBE Backend — Bindings to the ``cryptography`` primitives.

Maps cipher and hash identifiers to ``cryptography`` algorithm classes and
modes, reports which of them the installed OpenSSL build can execute, and
runs the raw block transforms. No padding or framing happens here.

Legacy ciphers (TripleDES, Blowfish, RC2, ARC4) and the CFB/OFB modes come
from ``cryptography.hazmat.decrepit``. ``aes_ige256`` has no binding: OpenSSL
does not expose IGE through ``cryptography``, so it is never reported.

``des_cfb`` and ``des3_cfb`` use 8-bit feedback (CFB8), matching the
``des_cfb8``/``des_ede3_cfb8`` ciphers existing artifacts were written with.
The Blowfish CFB variant keeps 64-bit feedback.

Security Note:
    Never log key material or payloads.
"""
import os
import logging
from typing import Callable, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.decrepit.ciphers import algorithms as decrepit
from cryptography.hazmat.decrepit.ciphers import modes as decrepit_modes

from .algorithms import CipherId, HashId
from .exceptions import ConfigurationError, PrimitiveFailure

logger = logging.getLogger("navigator.pbe")

ModeFactory = Optional[Callable[[bytes], modes.Mode]]


def _ecb(iv: bytes) -> modes.Mode:
    return modes.ECB()


# cipher -> (algorithm class, mode factory taking the IV)
_CIPHER_BINDINGS: dict[CipherId, tuple[type, ModeFactory]] = {
    # single DES runs as TripleDES keyed K1 = K2 = K3, see _des_key()
    CipherId.DES_CBC: (decrepit.TripleDES, modes.CBC),
    CipherId.DES_CFB: (decrepit.TripleDES, decrepit_modes.CFB8),
    CipherId.DES3_CBC: (decrepit.TripleDES, modes.CBC),
    CipherId.DES3_CFB: (decrepit.TripleDES, decrepit_modes.CFB8),
    CipherId.DES_EDE3: (decrepit.TripleDES, modes.CBC),
    CipherId.BLOWFISH_CBC: (decrepit.Blowfish, modes.CBC),
    CipherId.BLOWFISH_CFB64: (decrepit.Blowfish, decrepit_modes.CFB),
    CipherId.BLOWFISH_OFB64: (decrepit.Blowfish, decrepit_modes.OFB),
    CipherId.RC2_CBC: (decrepit.RC2, modes.CBC),
    CipherId.AES_CBC: (algorithms.AES, modes.CBC),
    CipherId.AES_CBC128: (algorithms.AES, modes.CBC),
    CipherId.AES_CFB8: (algorithms.AES, decrepit_modes.CFB8),
    CipherId.AES_CFB128: (algorithms.AES, decrepit_modes.CFB),
    CipherId.AES_CBC256: (algorithms.AES, modes.CBC),
    CipherId.AES_CTR: (algorithms.AES, modes.CTR),
    CipherId.AES_ECB: (algorithms.AES, _ecb),
    CipherId.AES_GCM: (algorithms.AES, modes.GCM),
    CipherId.DES_ECB: (decrepit.TripleDES, _ecb),
    CipherId.BLOWFISH_ECB: (decrepit.Blowfish, _ecb),
    CipherId.RC4: (decrepit.ARC4, None),
}

_HASH_BINDINGS: dict[HashId, type] = {
    HashId.MD5: hashes.MD5,
    HashId.SHA: hashes.SHA1,
    HashId.SHA224: hashes.SHA224,
    HashId.SHA256: hashes.SHA256,
    HashId.SHA384: hashes.SHA384,
    HashId.SHA512: hashes.SHA512,
    HashId.SHA3_224: hashes.SHA3_224,
    HashId.SHA3_256: hashes.SHA3_256,
    HashId.SHA3_384: hashes.SHA3_384,
    HashId.SHA3_512: hashes.SHA3_512,
}


# ---------------------------------------------------------------------------
# Capability reporting
# ---------------------------------------------------------------------------

def _cipher_available(algorithm_cls: type, mode_factory: ModeFactory) -> bool:
    """Instantiate an encryptor with zeroed material to see if OpenSSL has it."""
    key_bits = min(algorithm_cls.key_sizes)
    if algorithm_cls is decrepit.TripleDES:
        # 8-byte TripleDES keys are deprecated
        key_bits = 192
    key = bytes(key_bits // 8)
    mode = None
    if mode_factory is not None:
        mode = mode_factory(bytes(algorithm_cls.block_size // 8))
    try:
        Cipher(algorithm_cls(key), mode).encryptor()
    except UnsupportedAlgorithm:
        return False
    return True


def _hmac_available(hash_cls: type) -> bool:
    try:
        hmac.HMAC(b"probe", hash_cls())
    except UnsupportedAlgorithm:
        return False
    return True


def reported_ciphers() -> set[CipherId]:
    """Return every cipher identifier the installed library can execute."""
    reported = set()
    for cipher, (algorithm_cls, mode_factory) in _CIPHER_BINDINGS.items():
        if _cipher_available(algorithm_cls, mode_factory):
            reported.add(cipher)
        else:
            logger.debug("Cipher %s not supported by the OpenSSL build", cipher)
    return reported


def reported_hashes() -> set[HashId]:
    """Return every hash identifier usable as an HMAC with the installed library."""
    reported = set()
    for hash_id, hash_cls in _HASH_BINDINGS.items():
        if _hmac_available(hash_cls):
            reported.add(hash_id)
        else:
            logger.debug("HMAC-%s not supported by the OpenSSL build", hash_id)
    return reported


def has_cipher(cipher: CipherId) -> bool:
    """True if the cipher has a binding and the installed library runs it."""
    binding = _CIPHER_BINDINGS.get(cipher)
    return binding is not None and _cipher_available(*binding)


def has_hash(hash_id: HashId) -> bool:
    """True if the hash has a binding and the installed library runs it."""
    hash_cls = _HASH_BINDINGS.get(hash_id)
    return hash_cls is not None and _hmac_available(hash_cls)


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def new_hmac(hash_id: HashId, key: bytes) -> hmac.HMAC:
    """Return an HMAC keyed with ``key`` for the given hash.

    Raises:
        ConfigurationError: If the hash has no binding.
        PrimitiveFailure: If the library refuses the algorithm.
    """
    try:
        hash_cls = _HASH_BINDINGS[hash_id]
    except KeyError:
        raise ConfigurationError(
            f"Hash {hash_id} is not available from the cryptography backend"
        ) from None
    try:
        return hmac.HMAC(key, hash_cls())
    except UnsupportedAlgorithm as err:
        raise PrimitiveFailure(f"HMAC-{hash_id} unavailable: {err}") from err


_SINGLE_DES = frozenset({CipherId.DES_CBC, CipherId.DES_CFB, CipherId.DES_ECB})


def _des_key(cipher: CipherId, key: bytes) -> bytes:
    """Expand a single DES key to K1 || K1 || K1 for TripleDES.

    EDE with three equal keys is plain DES, so the output is unchanged.
    """
    if cipher in _SINGLE_DES and len(key) == 8:
        return key * 3
    return key


def _cipher(cipher: CipherId, key: bytes, iv: bytes) -> Cipher:
    try:
        algorithm_cls, mode_factory = _CIPHER_BINDINGS[cipher]
    except KeyError:
        raise ConfigurationError(
            f"Cipher {cipher} is not available from the cryptography backend"
        ) from None
    mode = mode_factory(iv) if mode_factory is not None else None
    return Cipher(algorithm_cls(_des_key(cipher, key)), mode)


def block_encrypt(cipher: CipherId, key: bytes, iv: bytes, data: bytes) -> bytes:
    """Encrypt block-aligned ``data`` with raw key material and IV.

    Raises:
        ConfigurationError: If the cipher has no binding.
        PrimitiveFailure: If the library rejects the key, IV, or data.
    """
    try:
        encryptor = _cipher(cipher, key, iv).encryptor()
        return encryptor.update(data) + encryptor.finalize()
    except ConfigurationError:
        raise
    except (UnsupportedAlgorithm, ValueError) as err:
        raise PrimitiveFailure(f"{cipher} encryption failed: {err}") from err


def block_decrypt(cipher: CipherId, key: bytes, iv: bytes, data: bytes) -> bytes:
    """Decrypt ``data`` with raw key material and IV; no unpadding.

    Raises:
        ConfigurationError: If the cipher has no binding.
        PrimitiveFailure: If the library rejects the key, IV, or data.
    """
    try:
        decryptor = _cipher(cipher, key, iv).decryptor()
        return decryptor.update(data) + decryptor.finalize()
    except ConfigurationError:
        raise
    except (UnsupportedAlgorithm, ValueError) as err:
        raise PrimitiveFailure(f"{cipher} decryption failed: {err}") from err


def random_bytes(size: int) -> bytes:
    """Return ``size`` bytes from the OS CSPRNG."""
    try:
        return os.urandom(size)
    except (NotImplementedError, OSError) as err:
        raise PrimitiveFailure(f"random source failed: {err}") from err
