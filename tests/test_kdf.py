"""
Tests for PBKDF2-HMAC key derivation and key finishing.

Tests cover:
- RFC 6070 PBKDF2-HMAC-SHA1 vectors
- Agreement with hashlib.pbkdf2_hmac across hashes and multi-block lengths
- Determinism and avalanche
- Parameter validation
- Triple-key splitting
"""
import hashlib
import random

import pytest

from navigator_pbe.algorithms import CipherId, HashId
from navigator_pbe.exceptions import ConfigurationError
from navigator_pbe.kdf import (
    SingleKey,
    TripleSplitKey,
    make_key,
    pbkdf2,
    split_key,
)

# hashlib names of the hashes every OpenSSL build provides
HASHLIB_NAMES = {
    HashId.MD5: "md5",
    HashId.SHA: "sha1",
    HashId.SHA224: "sha224",
    HashId.SHA256: "sha256",
    HashId.SHA384: "sha384",
    HashId.SHA512: "sha512",
}


def _bit_difference(a: bytes, b: bytes) -> int:
    return bin(int.from_bytes(a, "big") ^ int.from_bytes(b, "big")).count("1")


class TestRFC6070:
    """PBKDF2-HMAC-SHA1 test vectors from RFC 6070."""

    @pytest.mark.parametrize("password,salt,iterations,length,expected", [
        (b"password", b"salt", 1, 20,
         "0c60c80f961f0e71f3a9b524af6012062fe037a6"),
        (b"password", b"salt", 2, 20,
         "ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957"),
        (b"password", b"salt", 4096, 20,
         "4b007901b765489abead49d926f721d065a429c1"),
        (b"passwordPASSWORDpassword",
         b"saltSALTsaltSALTsaltSALTsaltSALTsalt", 4096, 25,
         "3d2eec4fe41c849b80c8d83662c0e44a8b291a964cf2f07038"),
        (b"pass\x00word", b"sa\x00lt", 4096, 16,
         "56fa6aa75548099dcc37d7f03425e0c3"),
    ])
    def test_vector(self, password, salt, iterations, length, expected):
        derived = pbkdf2(password, salt, iterations, length, HashId.SHA)
        assert derived.hex() == expected

    def test_str_inputs_are_utf8(self):
        """Text passwords and salts are encoded as UTF-8."""
        assert pbkdf2("password", "salt", 1, 20, "sha") == pbkdf2(
            b"password", b"salt", 1, 20, "sha"
        )


class TestAgainstHashlib:
    """Cross-check with the stdlib implementation."""

    @pytest.mark.parametrize("hash_id", sorted(HASHLIB_NAMES, key=str))
    @pytest.mark.parametrize("length", [1, 16, 20, 24, 32, 65, 100])
    @pytest.mark.parametrize("iterations", [1, 3, 50])
    def test_matches_hashlib(self, hash_id, length, iterations):
        password, salt = b"correct horse", bytes(range(16))
        expected = hashlib.pbkdf2_hmac(
            HASHLIB_NAMES[hash_id], password, salt, iterations, dklen=length
        )
        assert pbkdf2(password, salt, iterations, length, hash_id) == expected

    def test_empty_password(self):
        expected = hashlib.pbkdf2_hmac("sha256", b"", b"salt", 2, dklen=32)
        assert pbkdf2(b"", b"salt", 2, 32, HashId.SHA256) == expected


class TestDerivationProperties:
    """Determinism, length and avalanche."""

    @pytest.mark.parametrize("length", [1, 8, 20, 21, 64, 129])
    def test_exact_length(self, length):
        assert len(pbkdf2(b"p", b"s", 2, length, HashId.SHA)) == length

    def test_deterministic(self):
        first = pbkdf2(b"secret", b"0123456789abcdef", 10, 32, HashId.SHA512)
        second = pbkdf2(b"secret", b"0123456789abcdef", 10, 32, HashId.SHA512)
        assert first == second

    def test_prefix_stability(self):
        """A shorter key is a prefix of a longer one (block-wise output)."""
        long_key = pbkdf2(b"secret", b"salt", 5, 100, HashId.SHA256)
        assert pbkdf2(b"secret", b"salt", 5, 40, HashId.SHA256) == long_key[:40]

    @pytest.mark.parametrize("target", ["password", "salt"])
    def test_avalanche(self, target):
        """Flipping one input bit changes about half of the output bits."""
        rng = random.Random(2017)
        total, differing = 0, 0
        for _ in range(16):
            password = bytearray(rng.randbytes(12))
            salt = bytearray(rng.randbytes(16))
            base = pbkdf2(bytes(password), bytes(salt), 2, 64, HashId.SHA512)
            flipped = password if target == "password" else salt
            bit = rng.randrange(len(flipped) * 8)
            flipped[bit // 8] ^= 1 << (bit % 8)
            other = pbkdf2(bytes(password), bytes(salt), 2, 64, HashId.SHA512)
            differing += _bit_difference(base, other)
            total += 64 * 8
        assert 0.4 < differing / total < 0.6

    def test_iterations_change_output(self):
        assert pbkdf2(b"p", b"s", 1, 32, "sha256") != pbkdf2(b"p", b"s", 2, 32, "sha256")


class TestValidation:
    """Invalid parameters raise ConfigurationError."""

    @pytest.mark.parametrize("iterations", [0, -1, 1.5, "10", True, None])
    def test_bad_iterations(self, iterations):
        with pytest.raises(ConfigurationError):
            pbkdf2(b"p", b"s", iterations, 16, HashId.SHA)

    @pytest.mark.parametrize("length", [0, -8, 2.0, None])
    def test_bad_key_length(self, length):
        with pytest.raises(ConfigurationError):
            pbkdf2(b"p", b"s", 1, length, HashId.SHA)

    @pytest.mark.parametrize("hash_id", ["sha999", "ripemd160", "md4"])
    def test_unusable_hash(self, hash_id):
        with pytest.raises(ConfigurationError):
            pbkdf2(b"p", b"s", 1, 16, hash_id)


class TestKeyFinishing:
    """make_key/split_key shapes."""

    def test_single_key(self):
        key = make_key(CipherId.AES_CBC256, HashId.SHA256, 1, "pw", b"salt")
        assert isinstance(key, SingleKey)
        assert key.key == pbkdf2(b"pw", b"salt", 1, 32, HashId.SHA256)

    @pytest.mark.parametrize("cipher", ["des3_cbc", "des3_cfb", "des_ede3", "des3_cbf"])
    def test_triple_split(self, cipher):
        key = make_key(cipher, HashId.SHA, 1, "pw", b"salt")
        material = pbkdf2(b"pw", b"salt", 1, 24, HashId.SHA)
        assert isinstance(key, TripleSplitKey)
        assert key.parts == (material[:8], material[8:16], material[16:])
        assert all(len(part) == 8 for part in key.parts)

    def test_split_requires_thirds(self):
        with pytest.raises(ConfigurationError):
            split_key(CipherId.DES3_CBC, bytes(20))

    def test_repr_hides_material(self):
        assert "\\x" not in repr(SingleKey(b"\x01\x02"))
        assert "bytes" in repr(TripleSplitKey(b"a", b"b", b"c"))

    def test_unknown_cipher(self):
        with pytest.raises(ConfigurationError):
            make_key("aes_xts", HashId.SHA, 1, "pw", b"salt")
