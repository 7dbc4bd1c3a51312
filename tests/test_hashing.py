"""
skyfs Primitive Test Suite

Covers the hash/KDF primitives, binary encodings and child seed derivation.
"""

import hashlib
import unittest

from skyfs import (
    ValidationError,
    OverflowDetectedError,
    derive_child_seed,
    derive_key,
    hash_all,
    hash_data_key,
    sha512,
)
from skyfs.encoding import encode_json, encode_number, encode_prefixed_bytes, encode_utf8_string, hex_to_bytes


class TestHashAll(unittest.TestCase):
    """BLAKE2b-256 over concatenated arguments."""

    def test_known_vector(self):
        self.assertEqual(
            hash_all(b"abc").hex(),
            "bddd813c634239723171ef3fee98579b94964e3bb1cb3e427262c8c068d52319"
        )

    def test_digest_length(self):
        self.assertEqual(len(hash_all(b"")), 32)
        self.assertEqual(len(hash_all(b"x" * 1000)), 32)

    def test_arguments_are_concatenated(self):
        self.assertEqual(hash_all(b"ab", b"c"), hash_all(b"abc"))
        self.assertEqual(hash_all(b"a", b"b", b"c"), hash_all(b"abc"))

    def test_argument_order_matters(self):
        self.assertNotEqual(hash_all(b"a", b"b"), hash_all(b"b", b"a"))

    def test_rejects_non_bytes(self):
        with self.assertRaises(ValidationError):
            hash_all("abc")


class TestSha512(unittest.TestCase):

    def test_matches_hashlib(self):
        self.assertEqual(sha512(b"skyfs"), hashlib.sha512(b"skyfs").digest())

    def test_string_is_utf8_encoded(self):
        self.assertEqual(sha512("ü"), sha512("ü".encode("utf-8")))


class TestDeriveKey(unittest.TestCase):

    def test_pbkdf2_parameters(self):
        expected = hashlib.pbkdf2_hmac("sha256", b"test-seed", b"", 1000, 32)
        self.assertEqual(derive_key("test-seed"), expected)

    def test_known_vector(self):
        self.assertEqual(
            derive_key("test-seed").hex(),
            "d5805ca550f5b80a37f7194d3a39ea51f40ee6f6cacd246a54019e6ab5c7c6b6"
        )

    def test_rejects_bytes(self):
        with self.assertRaises(ValidationError):
            derive_key(b"test-seed")


class TestEncoding(unittest.TestCase):

    def test_encode_number_little_endian(self):
        self.assertEqual(encode_number(1), b"\x01" + b"\x00" * 7)
        self.assertEqual(encode_number(0x0102), b"\x02\x01" + b"\x00" * 6)

    def test_encode_number_bounds(self):
        self.assertEqual(encode_number(2 ** 64 - 1), b"\xff" * 8)
        with self.assertRaises(OverflowDetectedError):
            encode_number(2 ** 64)
        with self.assertRaises(OverflowDetectedError):
            encode_number(-1)

    def test_prefixed_bytes(self):
        self.assertEqual(encode_prefixed_bytes(b"abc"), encode_number(3) + b"abc")
        self.assertEqual(encode_utf8_string("é"), encode_number(2) + "é".encode("utf-8"))

    def test_hex_to_bytes_rejects_odd_length(self):
        with self.assertRaises(ValidationError):
            hex_to_bytes("value", "abc")

    def test_hex_to_bytes_rejects_uppercase_and_trailing_newline(self):
        self.assertEqual(hex_to_bytes("value", "0aff"), b"\x0a\xff")
        for value in ["0AFF", "0aff\n"]:
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    hex_to_bytes("value", value)

    def test_encode_json_is_compact_utf8(self):
        self.assertEqual(encode_json("payload", {"a": [1, "é"]}), '{"a":[1,"é"]}'.encode("utf-8"))

    def test_encode_json_rejects_nan(self):
        with self.assertRaises(ValidationError) as ctx:
            encode_json("payload", float("nan"))
        self.assertEqual(
            str(ctx.exception),
            "Expected parameter 'payload' to be a JSON-serializable value, was type 'float', value 'nan'"
        )

    def test_hash_data_key(self):
        self.assertEqual(
            hash_data_key("foo").hex(),
            "056f1ef8df2086e5aa284c1331cea86662be52b2a2deca83fc1683dc91be11a3"
        )


class TestDeriveChildSeed(unittest.TestCase):

    def test_known_vector(self):
        self.assertEqual(
            derive_child_seed("a", "b"),
            "a8e8207a89c64c204a243d3df5a8e6c1bb36ff9a907abb8e7c825bf58e161491"
        )

    def test_non_commutative(self):
        self.assertNotEqual(derive_child_seed("a", "b"), derive_child_seed("b", "a"))
        self.assertEqual(
            derive_child_seed("b", "a"),
            "111051346dbe828b0a42d621346783ce876e3355fd0fa1bdf8abb8205ef7302e"
        )

    def test_field_boundary_matters(self):
        # Length prefixes keep ("ab", "c") and ("a", "bc") apart.
        self.assertNotEqual(derive_child_seed("ab", "c"), derive_child_seed("a", "bc"))

    def test_deterministic_lowercase_hex(self):
        seed = derive_child_seed("master", "child")
        self.assertEqual(seed, derive_child_seed("master", "child"))
        self.assertEqual(len(seed), 64)
        self.assertEqual(seed, seed.lower())

    def test_rejects_non_strings(self):
        with self.assertRaises(ValidationError) as ctx:
            derive_child_seed(1, "b")
        self.assertEqual(ctx.exception.name, "master_seed")
        with self.assertRaises(ValidationError) as ctx:
            derive_child_seed("a", None)
        self.assertEqual(ctx.exception.name, "seed")


if __name__ == "__main__":
    unittest.main()
