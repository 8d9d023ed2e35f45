"""
Algorithm identifiers.

Identifier values are the lowercase names used by existing configuration
files (``aes_cbc256``, ``sha512``...), so stored settings keep resolving to the
same algorithms.
"""
from enum import Enum


class CipherId(str, Enum):
    """Block cipher identifiers, including the ones excluded from use."""

    DES_CBC = "des_cbc"
    DES_CFB = "des_cfb"
    DES3_CBC = "des3_cbc"
    DES3_CFB = "des3_cfb"
    DES_EDE3 = "des_ede3"
    BLOWFISH_CBC = "blowfish_cbc"
    BLOWFISH_CFB64 = "blowfish_cfb64"
    BLOWFISH_OFB64 = "blowfish_ofb64"
    RC2_CBC = "rc2_cbc"
    AES_CBC = "aes_cbc"
    AES_CBC128 = "aes_cbc128"
    AES_CFB8 = "aes_cfb8"
    AES_CFB128 = "aes_cfb128"
    AES_CBC256 = "aes_cbc256"
    AES_IGE256 = "aes_ige256"
    # reported by the library but never used by us
    AES_CTR = "aes_ctr"
    AES_ECB = "aes_ecb"
    DES_ECB = "des_ecb"
    BLOWFISH_ECB = "blowfish_ecb"
    RC4 = "rc4"
    AES_GCM = "aes_gcm"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            name = value.strip().lower()
            name = _CIPHER_ALIASES.get(name, name)
            for member in cls:
                if member.value == name:
                    return member
        return None

    def __str__(self) -> str:
        return self.value


class HashId(str, Enum):
    """Hash identifiers selecting the HMAC variant used by PBKDF2."""

    MD4 = "md4"
    MD5 = "md5"
    SHA = "sha"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA3_224 = "sha3_224"
    SHA3_256 = "sha3_256"
    SHA3_384 = "sha3_384"
    SHA3_512 = "sha3_512"
    RIPEMD160 = "ripemd160"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            name = value.strip().lower().replace("-", "")
            name = _HASH_ALIASES.get(name, name)
            for member in cls:
                if member.value == name:
                    return member
        return None

    def __str__(self) -> str:
        return self.value


# Legacy spellings accepted on input.
_CIPHER_ALIASES = {
    "des3_cbf": "des3_cfb",
}

_HASH_ALIASES = {
    "sha1": "sha",
    "sha3224": "sha3_224",
    "sha3256": "sha3_256",
    "sha3384": "sha3_384",
    "sha3512": "sha3_512",
}
