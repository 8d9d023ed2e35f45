"""Navigator PBE — Password-based encryption of secrets.

A passphrase is stretched with PBKDF2-HMAC into a cipher key; payloads are
padded, encrypted with a legacy-compatible block cipher and framed as
base64(salt || iv || ciphertext).

Security Note (Threat Model):
    Artifacts are NOT authenticated. Decrypting with a wrong passphrase,
    cipher, hash or iteration count usually returns garbage instead of
    raising, and tampering goes undetected. This is a property of the
    stored format; authenticated encryption requires a new format.
"""
from .version import __version__
from .algorithms import CipherId, HashId
from .catalog import (
    CipherSpec,
    HashSpec,
    supported_ciphers,
    supported_hashes,
    default_cipher,
    default_hash,
    default_iterations,
    cipher_spec,
    hash_spec,
)
from .exceptions import (
    PBEError,
    ConfigurationError,
    DecodeError,
    PrimitiveFailure,
    SerializationError,
)
from .kdf import pbkdf2, make_key, SingleKey, TripleSplitKey
from .crypto import encrypt, decrypt, encrypt_value, decrypt_value
from .serializers import JSONSerializer, PickleSerializer, get_serializer
from .config import PBEConfig, load_passphrase
from .vault import PassphraseVault

__all__ = [
    "__version__",
    "CipherId",
    "HashId",
    "CipherSpec",
    "HashSpec",
    "supported_ciphers",
    "supported_hashes",
    "default_cipher",
    "default_hash",
    "default_iterations",
    "cipher_spec",
    "hash_spec",
    "PBEError",
    "ConfigurationError",
    "DecodeError",
    "PrimitiveFailure",
    "SerializationError",
    "pbkdf2",
    "make_key",
    "SingleKey",
    "TripleSplitKey",
    "encrypt",
    "decrypt",
    "encrypt_value",
    "decrypt_value",
    "JSONSerializer",
    "PickleSerializer",
    "get_serializer",
    "PBEConfig",
    "load_passphrase",
    "PassphraseVault",
]
