"""
Tests for the Block record and its content digest.
"""

import hashlib

from simplechain.block import Block, GENESIS_BODY


class TestBlockConstruction:

    def test_new_block_has_placeholders(self):
        block = Block("payload")

        assert block.body == "payload"
        assert block.height == 0
        assert block.time == 0
        assert block.previous_block_hash == ""
        assert block.hash == ""

    def test_body_is_opaque(self):
        body = {"nested": [1, 2, {"x": None}], "flag": True}
        block = Block(body)

        assert block.to_dict()["body"] == body

    def test_genesis_sentinel(self):
        assert GENESIS_BODY == "First Block - Genesis"


class TestSerialization:

    def test_record_field_order(self):
        block = Block("a", height=3, time=1700000000, previous_block_hash="p", hash="h")

        assert list(block.to_dict()) == ["hash", "height", "body", "time", "previousBlockHash"]

    def test_from_dict_round_trip(self):
        block = Block({"k": "v"}, height=2, time=1700000000, previous_block_hash="p")
        block.hash = block.compute_hash()

        assert Block.from_dict(block.to_dict()) == block

    def test_from_dict_keeps_mismatching_hash(self):
        record = Block("a", height=1, time=5, previous_block_hash="p", hash="not-a-digest").to_dict()

        block = Block.from_dict(record)

        assert block.hash == "not-a-digest"

    def test_from_dict_keeps_stored_types(self):
        record = {"hash": "h", "height": "1", "body": "a", "time": 1700000000.5, "previousBlockHash": "p"}

        block = Block.from_dict(record)

        assert block.height == "1"
        assert block.time == 1700000000.5
        assert block.to_dict() == record
        assert not block.is_well_formed()

    def test_from_dict_keeps_unknown_fields_in_the_digest(self):
        record = Block("a", height=1, time=5, previous_block_hash="p").to_dict()
        plain = Block.from_dict(record)

        injected = Block.from_dict(dict(record, extra="injected"))

        assert injected.to_dict()["extra"] == "injected"
        assert injected.compute_hash() != plain.compute_hash()
        assert not injected.is_well_formed()

    def test_from_dict_with_missing_fields(self):
        block = Block.from_dict({"hash": "h", "body": "a"})

        assert block.to_dict() == {"hash": "h", "body": "a"}
        assert set(block.missing) == {"height", "time", "previousBlockHash"}
        assert not block.is_well_formed()

    def test_new_block_is_well_formed(self):
        assert Block("a").is_well_formed()
        assert not Block("a", height=True).is_well_formed()


class TestComputeHash:

    def test_digest_matches_compact_record(self):
        block = Block("A", height=1, time=1700000000, previous_block_hash="abc")

        raw = '{"hash":"","height":1,"body":"A","time":1700000000,"previousBlockHash":"abc"}'
        assert block.compute_hash() == hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def test_digest_ignores_current_hash(self):
        block = Block("A", height=1, time=10, previous_block_hash="abc")
        before = block.compute_hash()

        block.hash = "anything"

        assert block.compute_hash() == before
        assert block.hash == "anything"

    def test_digest_is_deterministic(self):
        one = Block({"x": 1}, height=4, time=99, previous_block_hash="p")
        two = Block({"x": 1}, height=4, time=99, previous_block_hash="p")

        assert one.compute_hash() == two.compute_hash()

    def test_digest_covers_every_field(self):
        base = Block("A", height=1, time=10, previous_block_hash="p")
        variants = [
            Block("B", height=1, time=10, previous_block_hash="p"),
            Block("A", height=2, time=10, previous_block_hash="p"),
            Block("A", height=1, time=11, previous_block_hash="p"),
            Block("A", height=1, time=10, previous_block_hash="q"),
        ]

        for variant in variants:
            assert variant.compute_hash() != base.compute_hash()

    def test_non_ascii_body_is_hashed_as_utf8(self):
        block = Block("héllo ✓", height=0, time=1)

        raw = '{"hash":"","height":0,"body":"héllo ✓","time":1,"previousBlockHash":""}'
        assert block.compute_hash() == hashlib.sha256(raw.encode("utf-8")).hexdigest()
