"""
skyfs Path Seed Test Suite

Expected values are hard-coded to catch breaking changes in the derivation.
"""

import unittest

from skyfs import (
    DirectorySeed,
    FileSeed,
    ValidationError,
    derive_directory_seed,
    derive_encrypted_file_key_entropy,
    derive_encrypted_file_tweak,
    derive_encrypted_path_seed,
    derive_file_seed,
    derive_root_path_seed,
    sanitize_path,
)


ROOT_PATH_SEED = "a" * 128
FILE_PATH_SEED = "a" * 64
SUB_PATH = "path/to/file.json"

EXPECTED_FILE_SEED = "40fb1701ab23fb020358baa5d5a2cba97d2de64c1e1418382ee6623fd9c17995"
EXPECTED_DIRECTORY_SEED = (
    "ae6e5be22469f4c6d89d8490906207d70753a06072db3af44c66e35b37c968a2"
    "c5457417f1cf099e3630e8255a58208d6a4b32a174c56c74877fef6412d1a02d"
)

PATH_SEED_ERROR = "Expected parameter 'path_seed' to be a directory path seed of length '128'"
FILE_PATH_SEED_ERROR = "Expected parameter 'path_seed' to be a valid file path seed of length '64'"


class TestDeriveEncryptedPathSeed(unittest.TestCase):

    def test_file_seed(self):
        self.assertEqual(derive_encrypted_path_seed(ROOT_PATH_SEED, SUB_PATH, False), EXPECTED_FILE_SEED)

    def test_directory_seed(self):
        self.assertEqual(derive_encrypted_path_seed(ROOT_PATH_SEED, SUB_PATH, True), EXPECTED_DIRECTORY_SEED)

    def test_directory_first_gives_same_file_seed(self):
        directory_seed = derive_encrypted_path_seed(ROOT_PATH_SEED, "path/to", True)
        self.assertEqual(len(directory_seed), 128)

        file_seed = derive_encrypted_path_seed(directory_seed, "file.json", False)
        self.assertEqual(file_seed, EXPECTED_FILE_SEED)

    def test_composition_at_every_split(self):
        names = SUB_PATH.split("/")
        for i in range(1, len(names)):
            with self.subTest(split=i):
                parent = derive_encrypted_path_seed(ROOT_PATH_SEED, "/".join(names[:i]), True)
                rest = "/".join(names[i:])
                self.assertEqual(derive_encrypted_path_seed(parent, rest, False), EXPECTED_FILE_SEED)
                self.assertEqual(derive_encrypted_path_seed(parent, rest, True), EXPECTED_DIRECTORY_SEED)

    def test_file_and_directory_differ(self):
        file_seed = derive_encrypted_path_seed(ROOT_PATH_SEED, "path", False)
        directory_seed = derive_encrypted_path_seed(ROOT_PATH_SEED, "path", True)
        self.assertNotEqual(file_seed, directory_seed[:64])

    def test_sibling_paths_differ(self):
        self.assertNotEqual(
            derive_encrypted_path_seed(ROOT_PATH_SEED, "path/a", False),
            derive_encrypted_path_seed(ROOT_PATH_SEED, "path/b", False)
        )

    def test_lowercase_hex(self):
        seed = derive_encrypted_path_seed(ROOT_PATH_SEED, SUB_PATH, True)
        self.assertEqual(seed, seed.lower())

    def test_uppercase_root_seed_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            derive_encrypted_path_seed("A" * 128, SUB_PATH, False)
        self.assertIn("to be a lowercase hex-encoded string", str(ctx.exception))

    def test_valid_sub_paths(self):
        cases = [
            ("path/file.json", False),
            ("path", True),
            ("path", False),
            ("path/file.json/bar", True),
            ("path/file.json/bar", False),
            ("path//to/file.json", True),
            ("path//to/file.json", False),
        ]
        for sub_path, is_directory in cases:
            with self.subTest(sub_path=sub_path, is_directory=is_directory):
                seed = derive_encrypted_path_seed(ROOT_PATH_SEED, sub_path, is_directory)
                self.assertEqual(len(seed), 128 if is_directory else 64)

    def test_redundant_slashes_and_whitespace_are_ignored(self):
        for sub_path in ["path//to/file.json", "/path/to/file.json/", "  path/to/file.json "]:
            with self.subTest(sub_path=sub_path):
                self.assertEqual(derive_encrypted_path_seed(ROOT_PATH_SEED, sub_path, False), EXPECTED_FILE_SEED)

    def test_empty_sub_path_rejected(self):
        for sub_path in ["", "/", "  ", "//"]:
            for is_directory in (True, False):
                with self.subTest(sub_path=sub_path, is_directory=is_directory):
                    with self.assertRaises(ValidationError) as ctx:
                        derive_encrypted_path_seed(ROOT_PATH_SEED, sub_path, is_directory)
                    self.assertIn("Expected parameter 'sub_path' to be a valid, non-empty path", str(ctx.exception))

    def test_invalid_path_seeds_rejected(self):
        cases = [
            (FILE_PATH_SEED, "path/to/file", True),
            (FILE_PATH_SEED, "path/to/file", False),
            ("b" * 63, "path/to/file", True),
            ("b" * 65, "path/to/file", False),
            ("c" * 127, "", True),
            ("c" * 129, "", False),
            ("c" * 127, "path", True),
            ("c" * 129, "path", False),
            ("", "path/to/file", True),
            ("", "path/to/file", False),
        ]
        for path_seed, sub_path, is_directory in cases:
            with self.subTest(length=len(path_seed), sub_path=sub_path, is_directory=is_directory):
                with self.assertRaises(ValidationError) as ctx:
                    derive_encrypted_path_seed(path_seed, sub_path, is_directory)
                self.assertIn(PATH_SEED_ERROR, str(ctx.exception))

    def test_non_hex_path_seed_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            derive_encrypted_path_seed("z" * 128, SUB_PATH, False)
        self.assertIn("to be a hex-encoded string", str(ctx.exception))

    def test_is_directory_must_be_bool(self):
        with self.assertRaises(ValidationError):
            derive_encrypted_path_seed(ROOT_PATH_SEED, SUB_PATH, 1)

    def test_sub_path_must_be_string(self):
        with self.assertRaises(ValidationError):
            derive_encrypted_path_seed(ROOT_PATH_SEED, None, False)


class TestTypedSeeds(unittest.TestCase):

    def test_derive_directory_seed(self):
        seed = derive_directory_seed(ROOT_PATH_SEED, SUB_PATH)
        self.assertIsInstance(seed, DirectorySeed)
        self.assertTrue(seed.is_directory)
        self.assertEqual(seed, EXPECTED_DIRECTORY_SEED)

    def test_derive_file_seed(self):
        seed = derive_file_seed(ROOT_PATH_SEED, SUB_PATH)
        self.assertIsInstance(seed, FileSeed)
        self.assertFalse(seed.is_directory)
        self.assertEqual(seed, EXPECTED_FILE_SEED)

    def test_file_seed_cannot_be_used_as_directory(self):
        file_seed = derive_file_seed(ROOT_PATH_SEED, SUB_PATH)
        with self.assertRaises(ValidationError):
            derive_file_seed(file_seed, "child")

    def test_constructors_validate_length(self):
        with self.assertRaises(ValidationError):
            DirectorySeed(FILE_PATH_SEED)
        with self.assertRaises(ValidationError):
            FileSeed(ROOT_PATH_SEED)
        self.assertEqual(FileSeed(FILE_PATH_SEED), FILE_PATH_SEED)

    def test_constructors_validate_hex(self):
        with self.assertRaises(ValidationError):
            FileSeed("g" * 64)

    def test_constructors_reject_uppercase_hex(self):
        with self.assertRaises(ValidationError):
            FileSeed("A" * 64)
        with self.assertRaises(ValidationError):
            DirectorySeed("A" * 128)


class TestSanitizePath(unittest.TestCase):

    def test_normalizes(self):
        self.assertEqual(sanitize_path(" /a//b/c/ "), "a/b/c")
        self.assertEqual(sanitize_path("a"), "a")

    def test_empty_returns_none(self):
        self.assertIsNone(sanitize_path(""))
        self.assertIsNone(sanitize_path("///"))


class TestDeriveEncryptedFileTweak(unittest.TestCase):

    def test_known_vector(self):
        self.assertEqual(
            derive_encrypted_file_tweak("b" * 64),
            "bf7f0e6566234184541e44ad2b2084ca207132a90a7b927e05fef9d24789caa7"
        )

    def test_non_hex_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            derive_encrypted_file_tweak("test.hns/foo")
        self.assertEqual(
            str(ctx.exception),
            "Expected parameter 'path_seed' to be a hex-encoded string, was type 'str', value 'test.hns/foo'"
        )

    def test_wrong_length_rejected(self):
        for path_seed in ["", "b" * 128, "b" * 63, "b" * 65]:
            with self.subTest(length=len(path_seed)):
                with self.assertRaises(ValidationError) as ctx:
                    derive_encrypted_file_tweak(path_seed)
                self.assertIn(FILE_PATH_SEED_ERROR, str(ctx.exception))

    def test_uppercase_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            derive_encrypted_file_tweak("B" * 64)
        self.assertIn("to be a lowercase hex-encoded string", str(ctx.exception))


class TestDeriveEncryptedFileKeyEntropy(unittest.TestCase):

    def test_known_vector(self):
        expected = bytes([
            145, 247, 132, 82, 184, 94, 1, 97, 214, 174, 84, 50, 40, 0, 247, 144, 106, 110, 227, 25, 193, 138, 249,
            233, 32, 94, 186, 244, 48, 171, 115, 171,
        ])
        self.assertEqual(derive_encrypted_file_key_entropy(FILE_PATH_SEED), expected)

    def test_length(self):
        self.assertEqual(len(derive_encrypted_file_key_entropy(EXPECTED_FILE_SEED)), 32)

    def test_independent_of_tweak(self):
        key = derive_encrypted_file_key_entropy(EXPECTED_FILE_SEED)
        tweak = derive_encrypted_file_tweak(EXPECTED_FILE_SEED)
        self.assertNotEqual(key.hex(), tweak)

    def test_directory_seed_rejected(self):
        with self.assertRaises(ValidationError):
            derive_encrypted_file_key_entropy(ROOT_PATH_SEED)

    def test_uppercase_rejected(self):
        with self.assertRaises(ValidationError):
            derive_encrypted_file_key_entropy("A" * 64)


class TestDeriveRootPathSeed(unittest.TestCase):

    def test_known_vector(self):
        self.assertEqual(
            derive_root_path_seed("test-seed"),
            "560604c6ea0d7705458b1e684b57e9bafdbb469092ef6a358d25e558add96277"
            "9751811a2c6b485aa75619c36c803fcfe80f2bcf17647d2b7abd7e30818e5a17"
        )

    def test_is_directory_seed(self):
        seed = derive_root_path_seed("test-seed")
        self.assertIsInstance(seed, DirectorySeed)
        # Usable as the root of the hierarchy.
        self.assertEqual(len(derive_file_seed(seed, SUB_PATH)), 64)


if __name__ == "__main__":
    unittest.main()
