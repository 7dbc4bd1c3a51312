#!/usr/bin/env python3
"""
skyfs Command Line Interface

Usage:
    skyfs keygen [--length N]
    skyfs keypair --seed <seed>
    skyfs child-seed --master <seed> --sub <seed>
    skyfs path-seed --seed <directory seed> --path <path> [--directory]
    skyfs tweak --seed <file seed>
    skyfs pad <size>
    skyfs encrypt --seed <file seed> --input <file.json> --output <file>
    skyfs decrypt --seed <file seed> --input <file> [--output <file.json>]
"""

import argparse
import json
import sys
from dataclasses import asdict
from typing import List, Optional

from . import config
from .errors import SkyfsError
from .logging_config import configure_logging, set_operation_id


def load_json(path: str):
    """Load JSON from file."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def print_json(data) -> None:
    print(json.dumps(data, indent=2))


def cmd_keygen(args) -> int:
    """Generate a random seed and its key pair."""
    from .crypto import gen_key_pair_and_seed

    result = gen_key_pair_and_seed() if args.length is None else gen_key_pair_and_seed(args.length)
    print_json(asdict(result))
    return 0


def cmd_keypair(args) -> int:
    """Derive the key pair of an existing seed."""
    from .crypto import gen_key_pair_from_seed

    print_json(asdict(gen_key_pair_from_seed(args.seed)))
    return 0


def cmd_child_seed(args) -> int:
    from .crypto import derive_child_seed

    print(derive_child_seed(args.master, args.sub))
    return 0


def cmd_path_seed(args) -> int:
    """Derive a file or directory path seed."""
    from .path_seeds import derive_encrypted_path_seed

    print(derive_encrypted_path_seed(args.seed, args.path, args.directory))
    return 0


def cmd_tweak(args) -> int:
    from .path_seeds import derive_encrypted_file_tweak

    print(derive_encrypted_file_tweak(args.seed))
    return 0


def cmd_pad(args) -> int:
    from .padding import check_padded_block, pad_file_size

    print_json({
        "size": args.size,
        "padded_size": pad_file_size(args.size),
        "is_padded_block": check_padded_block(args.size),
    })
    return 0


def cmd_encrypt(args) -> int:
    """Encrypt a JSON file with the key of a file path seed."""
    from .encrypted_files import ENCRYPTED_JSON_RESPONSE_VERSION, EncryptedFileMetadata, encrypt_json_file
    from .path_seeds import derive_encrypted_file_key_entropy

    key = derive_encrypted_file_key_entropy(args.seed)
    container = encrypt_json_file(
        load_json(args.input),
        EncryptedFileMetadata(version=ENCRYPTED_JSON_RESPONSE_VERSION),
        key,
    )
    with open(args.output, 'wb') as f:
        f.write(container)

    print(f"Encrypted {len(container)} bytes to: {args.output}", file=sys.stderr)
    return 0


def cmd_decrypt(args) -> int:
    """Decrypt a container with the key of a file path seed."""
    from .encrypted_files import decrypt_json_file
    from .path_seeds import derive_encrypted_file_key_entropy

    with open(args.input, 'rb') as f:
        container = f.read()

    data = decrypt_json_file(container, derive_encrypted_file_key_entropy(args.seed))
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        print(f"Decrypted JSON saved to: {args.output}", file=sys.stderr)
    else:
        print_json(data)
    return 0


COMMANDS = {
    "keygen": cmd_keygen,
    "keypair": cmd_keypair,
    "child-seed": cmd_child_seed,
    "path-seed": cmd_path_seed,
    "tweak": cmd_tweak,
    "pad": cmd_pad,
    "encrypt": cmd_encrypt,
    "decrypt": cmd_decrypt,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skyfs",
        description="skyfs key derivation and encrypted container tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  skyfs keygen
  skyfs path-seed -s <128 hex chars> -p apps/notes/todo.json
  skyfs tweak -s <64 hex chars>
  skyfs pad 107520
  skyfs encrypt -s <64 hex chars> -i todo.json -o todo.bin
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    keygen_parser = subparsers.add_parser("keygen", help="Generate a seed and key pair")
    keygen_parser.add_argument("-l", "--length", type=int, help="Seed length in bytes")

    keypair_parser = subparsers.add_parser("keypair", help="Derive the key pair of a seed")
    keypair_parser.add_argument("-s", "--seed", required=True, help="Seed")

    child_parser = subparsers.add_parser("child-seed", help="Derive a child seed")
    child_parser.add_argument("-m", "--master", required=True, help="Master seed")
    child_parser.add_argument("-s", "--sub", required=True, help="Sub seed")

    path_parser = subparsers.add_parser("path-seed", help="Derive a path seed")
    path_parser.add_argument("-s", "--seed", required=True, help="Directory path seed")
    path_parser.add_argument("-p", "--path", required=True, help="Relative path")
    path_parser.add_argument("-d", "--directory", action="store_true", help="Path is a directory")

    tweak_parser = subparsers.add_parser("tweak", help="Derive the registry tweak of a file seed")
    tweak_parser.add_argument("-s", "--seed", required=True, help="File path seed")

    pad_parser = subparsers.add_parser("pad", help="Compute the padded size")
    pad_parser.add_argument("size", type=int, help="Size in bytes")

    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt a JSON file")
    encrypt_parser.add_argument("-s", "--seed", required=True, help="File path seed")
    encrypt_parser.add_argument("-i", "--input", required=True, help="JSON input file")
    encrypt_parser.add_argument("-o", "--output", required=True, help="Container output file")

    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt a container")
    decrypt_parser.add_argument("-s", "--seed", required=True, help="File path seed")
    decrypt_parser.add_argument("-i", "--input", required=True, help="Container input file")
    decrypt_parser.add_argument("-o", "--output", help="JSON output file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config.validate_config()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    configure_logging(config.LOG_LEVEL, config.LOG_JSON, config.LOG_FILE)
    set_operation_id()

    parser = build_parser()
    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args)
    except (SkyfsError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
