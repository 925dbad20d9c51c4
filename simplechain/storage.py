# simplechain/storage.py
import json
from pathlib import Path

from config.settings import CHAIN_DIR, FERNET_KEY_FILE
from simplechain.crypto import CryptoStore
from simplechain.errors import BlockNotFound, StorageReadError, StorageWriteError

RECORD_SUFFIX = ".enc"


def is_key(key) -> bool:
    return isinstance(key, int) and not isinstance(key, bool) and key >= 0


def check_key(key) -> int:
    if not is_key(key):
        raise ValueError(f"Storage key must be a non-negative int, got {key!r}")
    return key


class StorageAdapter:
    """
    Key-value store for serialized blocks, keyed by block height.

    Values are plain dicts (the block record). Backends own the
    encoding; callers never see the stored bytes.
    Lifecycle: open -> use -> close, or use as a context manager.
    """

    def open(self):
        return self

    def close(self):
        pass

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def put(self, key: int, value: dict) -> None:
        raise NotImplementedError

    def get(self, key: int) -> dict:
        raise NotImplementedError

    def scan_all(self) -> list[dict]:
        """Every stored value in ascending key order. Fresh on each call."""
        raise NotImplementedError


class MemoryStorage(StorageAdapter):
    def __init__(self):
        self.records = {}

    def put(self, key, value):
        key = check_key(key)
        try:
            self.records[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageWriteError(f"Block {key} submission failed: {e}") from e

    def get(self, key):
        if not is_key(key) or key not in self.records:
            raise BlockNotFound(key)
        return json.loads(self.records[key])

    def scan_all(self):
        return [json.loads(self.records[key]) for key in sorted(self.records)]


class ChainStorage(StorageAdapter):
    """One Fernet-encrypted file per block: <chain_dir>/<height>.enc"""

    def __init__(self, chain_dir: Path = CHAIN_DIR, key_file: Path = FERNET_KEY_FILE):
        self.chain_dir = Path(chain_dir)
        self.key_file = Path(key_file)
        self.crypto = None

    def open(self):
        if self.crypto is None:
            try:
                self.chain_dir.mkdir(parents=True, exist_ok=True)
                self.crypto = CryptoStore(self.key_file)
            except OSError as e:
                raise StorageReadError(f"Unable to open chain storage at {self.chain_dir}: {e}") from e
        return self

    def close(self):
        self.crypto = None

    def _crypto(self):
        if self.crypto is None:
            self.open()
        return self.crypto

    def path_for(self, key: int) -> Path:
        return self.chain_dir / f"{key}{RECORD_SUFFIX}"

    def put(self, key, value):
        key = check_key(key)
        crypto = self._crypto()
        path = self.path_for(key)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_bytes(crypto.encrypt(value))
            tmp.replace(path)
        except (OSError, TypeError, ValueError) as e:
            print(f"❌ Block {key} submission failed: {e}")
            raise StorageWriteError(f"Block {key} submission failed: {e}") from e

    def get(self, key):
        if not is_key(key):
            raise BlockNotFound(key)
        crypto = self._crypto()
        path = self.path_for(key)
        if not path.exists():
            raise BlockNotFound(key)
        try:
            encrypted = path.read_bytes()
        except OSError as e:
            raise StorageReadError(f"Unable to read block {key}: {e}") from e
        return crypto.decrypt(encrypted)

    def keys(self) -> list[int]:
        try:
            names = [p.name for p in self.chain_dir.glob(f"*{RECORD_SUFFIX}")]
        except OSError as e:
            raise StorageReadError(f"Unable to read data stream: {e}") from e

        keys = []
        for name in names:
            stem = name[: -len(RECORD_SUFFIX)]
            # canonical decimal names only, so "01.enc" cannot alias "1.enc"
            if stem.isascii() and stem.isdigit() and stem == str(int(stem)):
                keys.append(int(stem))
        return sorted(keys)

    def scan_all(self):
        crypto = self._crypto()
        chain = []
        for key in self.keys():
            try:
                encrypted = self.path_for(key).read_bytes()
            except OSError as e:
                print(f"❌ Unable to read data stream: {e}")
                raise StorageReadError(f"Unable to read block {key}: {e}") from e
            chain.append(crypto.decrypt(encrypted))
        return chain
