"""
PassphraseVault — Passphrase-bound encryption of payloads and config values.

Provides the public API for applications holding one passphrase:
- ``encrypt(cleartext)`` / ``decrypt(artifact)`` — byte payloads
- ``encrypt_value(value)`` / ``decrypt_value(artifact)`` — structured values
- ``decrypt_tree(data)`` — resolve ``{"encrypted": "<base64>"}`` entries in a
  nested configuration mapping
- ``from_env()`` — factory reading parameters and passphrase from the
  environment

Security Note:
    Never log passphrases or decrypted values. Only log entry paths and
    parameters. A wrong passphrase does not reliably raise (see ``crypto``).
"""
import logging
from typing import Any, Optional, Union

from .config import PBEConfig, load_passphrase
from .crypto import encrypt, decrypt, encrypt_value, decrypt_value
from .exceptions import PBEError
from .serializers import Serializer, get_serializer

logger = logging.getLogger("navigator.pbe")

ENCRYPTED_KEY = "encrypted"


class PassphraseVault:
    """Stateless encryptor bound to a passphrase and a parameter triple.

    Every call derives a fresh key from a fresh salt; instances hold no
    mutable state and can be shared between threads.
    """

    def __init__(
        self,
        passphrase: Union[str, bytes],
        config: Optional[PBEConfig] = None,
        serializer: Optional[Serializer] = None,
    ):
        self._passphrase = passphrase
        self._config = config or PBEConfig()
        self._serializer = serializer or get_serializer("json")

    def __repr__(self) -> str:
        return (
            f"<PassphraseVault cipher={self._config.cipher} "
            f"hash={self._config.hash} iterations={self._config.iterations}>"
        )

    @property
    def config(self) -> PBEConfig:
        return self._config

    def _params(self) -> tuple:
        cfg = self._config
        return cfg.cipher, cfg.hash, cfg.iterations, self._passphrase

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encrypt(self, cleartext: Union[str, bytes]) -> str:
        """Encrypt bytes (or UTF-8 text) into a base64 artifact."""
        return encrypt(*self._params(), cleartext)

    def decrypt(self, artifact: Union[str, bytes]) -> bytes:
        """Decrypt a base64 artifact back to bytes."""
        return decrypt(*self._params(), artifact)

    def encrypt_value(self, value: Any) -> str:
        """Serialize and encrypt a structured value."""
        return encrypt_value(*self._params(), value, self._serializer)

    def decrypt_value(self, artifact: Union[str, bytes]) -> Any:
        """Decrypt and deserialize a structured value."""
        return decrypt_value(*self._params(), artifact, self._serializer)

    def decrypt_tree(self, data: Any) -> Any:
        """Return a copy of ``data`` with every encrypted entry decrypted.

        An entry is a mapping with the single key ``"encrypted"`` whose value
        is an artifact; it is replaced by the decrypted UTF-8 string. Dicts,
        lists and tuples are walked recursively; other values are returned
        unchanged.

        Raises:
            PBEError: If an entry cannot be decrypted. The failing path is
                logged before re-raising.
        """
        return self._walk(data, "$")

    def _walk(self, data: Any, path: str) -> Any:
        if isinstance(data, dict):
            if len(data) == 1 and ENCRYPTED_KEY in data:
                try:
                    return self.decrypt(data[ENCRYPTED_KEY]).decode("utf-8")
                except (PBEError, UnicodeDecodeError) as err:
                    logger.error(
                        "Failed to decrypt configuration entry %s: %s",
                        path, type(err).__name__,
                    )
                    raise
            return {
                key: self._walk(value, f"{path}.{key}")
                for key, value in data.items()
            }
        if isinstance(data, (list, tuple)):
            walked = [
                self._walk(value, f"{path}[{idx}]")
                for idx, value in enumerate(data)
            ]
            return tuple(walked) if isinstance(data, tuple) else walked
        return data

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def from_env(
        cls,
        environ: Optional[dict[str, str]] = None,
        serializer: str = "json",
    ) -> "PassphraseVault":
        """Build a vault from PBE_* environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            serializer: Serializer name for structured values.

        Returns:
            Configured PassphraseVault instance.
        """
        config = PBEConfig.from_env(environ)
        passphrase = load_passphrase(environ)
        return cls(passphrase, config=config, serializer=get_serializer(serializer))
