"""
PBE Crypto Core — Encryption and decryption of payloads under a passphrase.

Artifact format (base64 of):
    [salt 16B][iv ivLength(cipher)B][ciphertext, multiple of blockSize(cipher)]

The artifact carries no algorithm identifier, version or integrity tag. The
cipher, hash and iteration count must be supplied identically at encrypt and
decrypt time.

Security Note:
    There is no authentication. Decrypting with the wrong passphrase or
    parameters does NOT reliably raise: it usually returns garbage bytes or
    a wrongly truncated buffer. Never log passphrases, keys, cleartext or
    ciphertext.
"""
import base64
import binascii
import logging
from typing import Any, Optional, Union

from .algorithms import CipherId, HashId
from .catalog import SALT_LENGTH, cipher_spec, hash_spec
from .exceptions import DecodeError
from .kdf import DerivedKey, SingleKey, TripleSplitKey, check_iterations, make_key
from .padding import pad, unpad
from .serializers import JSONSerializer, Serializer
from . import backend

logger = logging.getLogger("navigator.pbe")


def _key_material(key: DerivedKey) -> bytes:
    """Return the bytes handed to the cipher for either key shape."""
    if isinstance(key, SingleKey):
        return key.key
    if isinstance(key, TripleSplitKey):
        # TripleDES takes K1 || K2 || K3
        return b"".join(key.parts)
    raise TypeError(f"Unexpected key type: {type(key).__name__}")


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


# ---------------------------------------------------------------------------
# Byte payloads
# ---------------------------------------------------------------------------

def encrypt(
    cipher: Union[CipherId, str],
    hash_id: Union[HashId, str],
    iterations: int,
    passphrase: Union[str, bytes],
    cleartext: Union[str, bytes],
) -> str:
    """Encrypt ``cleartext`` under a passphrase.

    Args:
        cipher: Cipher identifier (see ``supported_ciphers()``).
        hash_id: Hash for PBKDF2 (see ``supported_hashes()``).
        iterations: PBKDF2 iteration count, at least 1.
        passphrase: Passphrase; ``str`` is UTF-8 encoded.
        cleartext: Payload; ``str`` is UTF-8 encoded.

    Returns:
        Base64 string of ``salt || iv || ciphertext``.

    Raises:
        ConfigurationError: On unknown identifiers or invalid iterations.
        PrimitiveFailure: If the cryptography library fails.
    """
    spec = cipher_spec(cipher)
    hash_id = hash_spec(hash_id).hash
    check_iterations(iterations)
    salt = backend.random_bytes(SALT_LENGTH)
    iv = backend.random_bytes(spec.iv_length)
    key = make_key(spec.cipher, hash_id, iterations, passphrase, salt)
    ciphertext = backend.block_encrypt(
        spec.cipher, _key_material(key), iv,
        pad(_to_bytes(cleartext), spec.block_size),
    )
    logger.debug(
        "Encrypted %d-byte payload with %s", len(ciphertext), spec.cipher,
    )
    return base64.b64encode(salt + iv + ciphertext).decode("ascii")


def decrypt(
    cipher: Union[CipherId, str],
    hash_id: Union[HashId, str],
    iterations: int,
    passphrase: Union[str, bytes],
    artifact: Union[str, bytes],
) -> bytes:
    """Decrypt an artifact produced by ``encrypt`` with the same parameters.

    A wrong passphrase or parameter usually yields garbage, not an error.

    Args:
        cipher: Cipher identifier used at encryption.
        hash_id: Hash used at encryption.
        iterations: Iteration count used at encryption.
        passphrase: Passphrase used at encryption.
        artifact: Base64 string (or ASCII bytes) from ``encrypt``.

    Returns:
        Cleartext bytes.

    Raises:
        ConfigurationError: On unknown identifiers or invalid iterations.
        DecodeError: If the artifact is not valid base64, is too short, or
            its ciphertext is not a positive multiple of the block size.
        PrimitiveFailure: If the cryptography library fails.
    """
    spec = cipher_spec(cipher)
    hash_id = hash_spec(hash_id).hash
    check_iterations(iterations)
    try:
        raw = base64.b64decode(artifact, validate=True)
    except (binascii.Error, TypeError, ValueError) as err:
        raise DecodeError(f"Artifact is not valid base64: {err}") from err

    header = SALT_LENGTH + spec.iv_length
    if len(raw) < header:
        raise DecodeError(
            f"Artifact too short: {len(raw)} bytes (minimum {header})"
        )
    salt = raw[:SALT_LENGTH]
    iv = raw[SALT_LENGTH:header]
    ciphertext = raw[header:]
    if not ciphertext or len(ciphertext) % spec.block_size:
        raise DecodeError(
            f"Ciphertext length {len(ciphertext)} is not a positive "
            f"multiple of {spec.block_size}"
        )

    key = make_key(spec.cipher, hash_id, iterations, passphrase, salt)
    padded = backend.block_decrypt(spec.cipher, _key_material(key), iv, ciphertext)
    logger.debug(
        "Decrypted %d-byte payload with %s", len(ciphertext), spec.cipher,
    )
    return unpad(padded)


# ---------------------------------------------------------------------------
# Structured values
# ---------------------------------------------------------------------------

def encrypt_value(
    cipher: Union[CipherId, str],
    hash_id: Union[HashId, str],
    iterations: int,
    passphrase: Union[str, bytes],
    value: Any,
    serializer: Optional[Serializer] = None,
) -> str:
    """Serialize ``value`` and encrypt it.

    Raises:
        SerializationError: If the serializer cannot encode the value.
    """
    serializer = serializer or JSONSerializer()
    return encrypt(cipher, hash_id, iterations, passphrase, serializer.dumps(value))


def decrypt_value(
    cipher: Union[CipherId, str],
    hash_id: Union[HashId, str],
    iterations: int,
    passphrase: Union[str, bytes],
    artifact: Union[str, bytes],
    serializer: Optional[Serializer] = None,
) -> Any:
    """Decrypt an artifact from ``encrypt_value`` and deserialize it.

    Raises:
        DecodeError: If the artifact or the decrypted payload is malformed.
    """
    serializer = serializer or JSONSerializer()
    return serializer.loads(decrypt(cipher, hash_id, iterations, passphrase, artifact))
