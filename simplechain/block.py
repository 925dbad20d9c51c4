# simplechain/block

from simplechain.utils import canonical_json, sha256_hex

GENESIS_BODY = "First Block - Genesis"

FIELDS = ("hash", "height", "body", "time", "previousBlockHash")


def is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Block:
    def __init__(
        self,
        body,
        height: int = 0,
        time: int = 0,
        previous_block_hash: str = "",
        hash: str = "",
    ):
        # height, time, previous_block_hash and hash are placeholders
        # until the chain engine fills them in on append
        self.hash = hash
        self.height = height
        self.body = body
        self.time = time
        self.previous_block_hash = previous_block_hash

        # set only by from_dict, so a loaded block hashes what was stored
        self.missing = ()
        self.extra = {}

    # --------------------------------------------------

    def compute_hash(self) -> str:
        payload = self.to_dict()
        payload["hash"] = ""
        return sha256_hex(canonical_json(payload))

    def is_genesis(self) -> bool:
        return self.height == 0

    # --------------------------------------------------

    def to_dict(self):
        # field order is part of the hashed format
        record = {
            "hash": self.hash,
            "height": self.height,
            "body": self.body,
            "time": self.time,
            "previousBlockHash": self.previous_block_hash,
        }
        for name in self.missing:
            record.pop(name, None)
        record.update(self.extra)
        return record

    @classmethod
    def from_dict(cls, data: dict):
        # values are kept exactly as stored, no coercion and no hash check:
        # a tampered record must still load so that validation can report it
        obj = cls(
            body=data.get("body"),
            height=data.get("height"),
            time=data.get("time"),
            previous_block_hash=data.get("previousBlockHash", ""),
            hash=data.get("hash", ""),
        )
        obj.missing = tuple(name for name in FIELDS if name not in data)
        obj.extra = {k: v for k, v in data.items() if k not in FIELDS}
        return obj

    def is_well_formed(self) -> bool:
        """Exactly the record fields, with the types the engine writes."""
        if self.missing or self.extra:
            return False
        return (
            is_int(self.height)
            and is_int(self.time)
            and isinstance(self.hash, str)
            and isinstance(self.previous_block_hash, str)
        )

    # --------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, Block):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"Block(height={self.height!r}, time={self.time!r}, "
            f"hash={str(self.hash)[:16]!r}, body={self.body!r})"
        )
