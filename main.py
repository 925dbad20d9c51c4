# main.py
import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from config.settings import CHAIN_DIR, FERNET_KEY_FILE
from simplechain.blockchain import Blockchain
from simplechain.errors import BlockNotFound, StorageError
from simplechain.storage import ChainStorage


def open_blockchain(args: argparse.Namespace):
    storage = ChainStorage(chain_dir=args.chain_dir, key_file=args.key_file).open()
    return storage, Blockchain.initialize(storage)


def dump(block) -> str:
    return json.dumps(block.to_dict(), ensure_ascii=False)


# -----------------------------
# COMMANDS
# -----------------------------

def cmd_demo(args: argparse.Namespace) -> int:
    storage, blockchain = open_blockchain(args)
    with storage:
        print("1. Get genesis block data")
        print(dump(blockchain.get_block(0)))

        print("2. Add new block")
        blockchain.append(f"New test block at {datetime.now()}")

        print("3. Get current block height")
        block_height = blockchain.height()
        print(f"blockchain height: {block_height}")

        print(f"4. Validate block at {block_height}")
        result = blockchain.validate_block_at(block_height)
        print(f"Block at {block_height} validate status: {result}")

        print(f"5. Get block data at {block_height}")
        print(f"Block at {block_height}: {dump(blockchain.get_block(block_height))}")

        print("6. Validate entire block chain")
        errors = blockchain.validate_chain()

    return 0 if not errors else 1


def cmd_add(args: argparse.Namespace) -> int:
    body = args.body
    if args.json:
        try:
            body = json.loads(body)
        except ValueError as e:
            print(f"❌ Invalid JSON body: {e}")
            return 1

    storage, blockchain = open_blockchain(args)
    with storage:
        block = blockchain.append(body)
        print(dump(block))
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    storage, blockchain = open_blockchain(args)
    with storage:
        try:
            block = blockchain.get_block(args.height)
        except BlockNotFound as e:
            print(f"❌ {e}")
            return 1
        print(dump(block))
    return 0


def cmd_height(args: argparse.Namespace) -> int:
    storage, blockchain = open_blockchain(args)
    with storage:
        print(blockchain.height())
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    storage, blockchain = open_blockchain(args)
    with storage:
        if args.height is None:
            return 0 if not blockchain.validate_chain() else 1

        try:
            valid = blockchain.validate_block_at(args.height)
        except BlockNotFound as e:
            print(f"❌ {e}")
            return 1
        print(f"Block at {args.height} validate status: {valid}")
        return 0 if valid else 1


# -----------------------------
# ENTRY POINT
# -----------------------------

def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplechain",
        description="Append-only hash-linked chain backed by encrypted storage",
    )
    parser.add_argument("--chain-dir", type=Path, default=CHAIN_DIR, help="Block storage directory")
    parser.add_argument("--key-file", type=Path, default=FERNET_KEY_FILE, help="Fernet key file")

    subparsers = parser.add_subparsers(title="commands", dest="command")

    demo_parser = subparsers.add_parser("demo", help="Run the chain walkthrough")
    demo_parser.set_defaults(func=cmd_demo)

    add_parser = subparsers.add_parser("add", help="Append a block")
    add_parser.add_argument("body", help="Block payload")
    add_parser.add_argument("--json", action="store_true", help="Parse the payload as JSON")
    add_parser.set_defaults(func=cmd_add)

    get_parser = subparsers.add_parser("get", help="Show the block at a height")
    get_parser.add_argument("height", type=int)
    get_parser.set_defaults(func=cmd_get)

    height_parser = subparsers.add_parser("height", help="Show the chain height")
    height_parser.set_defaults(func=cmd_height)

    validate_parser = subparsers.add_parser("validate", help="Validate one block or the whole chain")
    validate_parser.add_argument("height", type=int, nargs="?", default=None)
    validate_parser.set_defaults(func=cmd_validate)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except StorageError as e:
        print(f"❌ Storage failure: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
