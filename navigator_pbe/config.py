"""
PBE Configuration — Validated encryption parameters and passphrase loading.

Reads settings from environment variables:
    PBE_CIPHER = <cipher identifier>      (default: aes_cbc256)
    PBE_HASH = <hash identifier>          (default: sha512)
    PBE_ITERATIONS = <integer >= 1>       (default: 1000)
    PBE_PASSPHRASE = <passphrase>
    PBE_PASSPHRASE_FILE = <path to a file holding the passphrase>

Security Note:
    Never log the passphrase. Only log identifiers and iteration counts.
"""
import os
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .algorithms import CipherId, HashId
from .catalog import (
    DEFAULT_CIPHER,
    DEFAULT_HASH,
    DEFAULT_ITERATIONS,
    cipher_spec,
    hash_spec,
)
from .exceptions import ConfigurationError
from . import backend

logger = logging.getLogger("navigator.pbe")


def load_passphrase(environ: Optional[dict[str, str]] = None) -> str:
    """Load the passphrase from PBE_PASSPHRASE or PBE_PASSPHRASE_FILE.

    The inline variable wins when both are set. A trailing newline in the
    passphrase file is stripped.

    Args:
        environ: Mapping to read instead of ``os.environ``.

    Returns:
        The passphrase.

    Raises:
        ConfigurationError: If neither variable is set, the file cannot be
            read, or the passphrase is empty.
    """
    env = os.environ if environ is None else environ
    passphrase = env.get("PBE_PASSPHRASE")
    if passphrase is None:
        path = env.get("PBE_PASSPHRASE_FILE")
        if path is None:
            raise ConfigurationError(
                "No passphrase configured. "
                "Set PBE_PASSPHRASE or PBE_PASSPHRASE_FILE=<path>"
            )
        try:
            with open(path, encoding="utf-8") as fp:
                passphrase = fp.read().rstrip("\r\n")
        except OSError as err:
            raise ConfigurationError(
                f"Cannot read passphrase file {path}: {err.strerror}"
            ) from err
        logger.debug("Loaded passphrase from file %s", path)
    if not passphrase:
        raise ConfigurationError("Passphrase cannot be empty")
    return passphrase


class PBEConfig(BaseModel):
    """Validated encryption parameters (cipher, hash, iterations)."""

    cipher: CipherId = Field(default=DEFAULT_CIPHER)
    hash: HashId = Field(default=DEFAULT_HASH)
    iterations: int = Field(default=DEFAULT_ITERATIONS, ge=1)

    model_config = {"frozen": True}

    @field_validator("cipher", mode="before")
    @classmethod
    def validate_cipher(cls, v: Any) -> CipherId:
        """Resolve legacy names and reject ciphers that cannot run."""
        cipher = cipher_spec(v).cipher
        if not backend.has_cipher(cipher):
            raise ConfigurationError(
                f"Cipher {cipher} is not available from the cryptography backend"
            )
        return cipher

    @field_validator("hash", mode="before")
    @classmethod
    def validate_hash(cls, v: Any) -> HashId:
        """Resolve legacy names and reject hashes that cannot run."""
        hash_id = hash_spec(v).hash
        if not backend.has_hash(hash_id):
            raise ConfigurationError(
                f"Hash {hash_id} is not available from the cryptography backend"
            )
        return hash_id

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "PBEConfig":
        """Create PBEConfig from PBE_CIPHER, PBE_HASH and PBE_ITERATIONS.

        Unset variables fall back to the defaults.

        Returns:
            Populated PBEConfig instance.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        if "PBE_CIPHER" in env:
            values["cipher"] = env["PBE_CIPHER"]
        if "PBE_HASH" in env:
            values["hash"] = env["PBE_HASH"]
        if "PBE_ITERATIONS" in env:
            values["iterations"] = env["PBE_ITERATIONS"]
        config = cls(**values)
        logger.info(
            "PBE configured: cipher=%s hash=%s iterations=%d",
            config.cipher, config.hash, config.iterations,
        )
        return config
