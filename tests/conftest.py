import pytest

from simplechain.blockchain import Blockchain
from simplechain.storage import ChainStorage, MemoryStorage


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def blockchain(storage):
    return Blockchain.initialize(storage)


@pytest.fixture
def chain_storage(tmp_path):
    storage = ChainStorage(chain_dir=tmp_path / "chaindata", key_file=tmp_path / "node.fernet.key")
    with storage:
        yield storage


@pytest.fixture
def tamper():
    def rewrite(storage, height, /, **changes):
        """Rewrite a stored record in place without touching its hash."""
        record = storage.get(height)
        record.update(changes)
        storage.put(height, record)

    return rewrite
