# simplechain/blockchain
import threading
from dataclasses import dataclass

from simplechain import genesis
from simplechain.block import Block, is_int
from simplechain.errors import BlockNotFound, ChainGapError
from simplechain.utils import now_seconds, short_hash


@dataclass(frozen=True)
class IntegrityViolation:
    """A finding of the chain scan. Reported as data, never raised."""

    height: int
    kind: str  # "hash" or "link"
    expected: str
    actual: str


class Blockchain:
    def __init__(self, storage):
        self.storage = storage
        # single writer: append reads the tail length then writes at that height
        self.lock = threading.Lock()

    @classmethod
    def initialize(cls, storage):
        """Open an engine over `storage` and make sure genesis exists."""
        print("initializing")
        blockchain = cls(storage)
        genesis.generate(blockchain)
        return blockchain

    # --------------------------------------------------
    # READ
    # --------------------------------------------------

    def _load_chain(self) -> list[Block]:
        return [Block.from_dict(record) for record in self.storage.scan_all()]

    def blocks(self) -> list[Block]:
        with self.lock:
            return self._load_chain()

    def height(self) -> int:
        """Height of the tail block, -1 when the chain is empty."""
        return len(self.blocks()) - 1

    def get_block(self, height: int) -> Block:
        if not is_int(height) or height < 0:
            raise BlockNotFound(height)
        return Block.from_dict(self.storage.get(height))

    # --------------------------------------------------
    # WRITE
    # --------------------------------------------------

    def append(self, body) -> Block:
        return self.add_block(Block(body))

    def add_block(self, new_block: Block) -> Block:
        with self.lock:
            chain = self._load_chain()

            # refuse to write over a stored block when heights have a gap
            for i, stored in enumerate(chain):
                if not is_int(stored.height) or stored.height != i:
                    raise ChainGapError(
                        f"Block at position {i} has height {stored.height!r}, refusing to append"
                    )

            block = Block(
                body=new_block.body,
                height=len(chain),
                time=now_seconds(),
                previous_block_hash=chain[-1].hash if chain else "",
            )
            block.hash = block.compute_hash()

            # StorageWriteError propagates: the block is not reported as added
            self.storage.put(block.height, block.to_dict())

        print(f"⛓️ Block #{block.height} added")
        print(f"   Hash: {short_hash(block.hash)}")
        return block

    # --------------------------------------------------
    # VALIDATION
    # --------------------------------------------------

    def validate_block(self, block: Block) -> bool:
        # compute_hash works on a copy of the record with hash cleared
        block_hash = block.hash
        valid_block_hash = block.compute_hash()

        if not block.is_well_formed():
            print(
                f"❌ Block #{block.height!r} malformed record: "
                f"missing={list(block.missing)} extra={sorted(block.extra)}"
            )
            return False

        if block_hash == valid_block_hash:
            return True

        print(f"❌ Block #{block.height} invalid hash:\n{block_hash}<>{valid_block_hash}")
        return False

    def validate_block_at(self, height: int) -> bool:
        return self.validate_block(self.get_block(height))

    def audit_chain(self) -> list[IntegrityViolation]:
        chain = self.blocks()
        findings = []

        for i, block in enumerate(chain):
            # content hash, every block including the tail
            if not self.validate_block(block):
                findings.append(IntegrityViolation(
                    height=i,
                    kind="hash",
                    expected=block.compute_hash(),
                    actual=block.hash,
                ))

            # forward link, no successor for the tail
            if i < len(chain) - 1:
                next_block = chain[i + 1]
                if block.hash != next_block.previous_block_hash:
                    findings.append(IntegrityViolation(
                        height=i,
                        kind="link",
                        expected=block.hash,
                        actual=next_block.previous_block_hash,
                    ))

        return findings

    def validate_chain(self) -> list[int]:
        """Heights that failed integrity, ascending; a height may repeat."""
        error_log = [finding.height for finding in self.audit_chain()]

        if error_log:
            print(f"Block errors = {len(error_log)}")
            print(f"Blocks: {error_log}")
        else:
            print("✅ No errors detected")

        return error_log
