"""
PBE Padding — PKCS#7-style block alignment.

``pad`` always appends between 1 and ``block_size`` bytes, each holding the
pad count, so a cleartext that is already aligned gets a full extra block.

``unpad`` trusts the last byte and drops that many bytes without checking
the rest of the pad. Decrypting with the wrong passphrase therefore usually
returns a wrongly truncated buffer instead of failing.
"""
from cryptography.hazmat.primitives import padding

from .exceptions import ConfigurationError, DecodeError


def pad(data: bytes, block_size: int) -> bytes:
    """Pad ``data`` to a multiple of ``block_size`` bytes.

    Raises:
        ConfigurationError: If ``block_size`` is not in ``1..255``.
    """
    if not 1 <= block_size <= 255:
        raise ConfigurationError(
            f"Block size must be between 1 and 255 bytes, got {block_size}"
        )
    padder = padding.PKCS7(block_size * 8).padder()
    return padder.update(bytes(data)) + padder.finalize()


def unpad(data: bytes) -> bytes:
    """Strip the pad announced by the last byte of ``data``.

    Raises:
        DecodeError: If ``data`` is empty or shorter than its pad count.
    """
    if not data:
        raise DecodeError("Cannot unpad an empty buffer")
    count = data[-1]
    if count > len(data):
        raise DecodeError(
            f"Pad count {count} exceeds buffer length {len(data)}"
        )
    return bytes(data[:len(data) - count])
