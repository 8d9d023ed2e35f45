"""
PBE Exceptions.

Every error raised by the package derives from ``PBEError``. Each kind also
subclasses the builtin a caller would naturally catch (``ValueError`` for bad
input, ``RuntimeError`` for library failures).

Security Note:
    Messages carry identifiers and lengths only, never passphrases,
    keys, cleartext or ciphertext.
"""


class PBEError(Exception):
    """Base class for password-based encryption errors."""


class ConfigurationError(PBEError, ValueError):
    """Unknown cipher/hash identifier or invalid derivation parameters."""


class DecodeError(PBEError, ValueError):
    """An encrypted artifact or serialized payload cannot be decoded."""


class PrimitiveFailure(PBEError, RuntimeError):
    """The cryptographic primitive library reported an error.

    The original library exception is kept as ``__cause__``.
    """


class SerializationError(PBEError, TypeError):
    """A structured value cannot be converted to bytes."""
