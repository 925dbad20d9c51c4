# simplechain/crypto.py

from cryptography.fernet import Fernet, InvalidToken
from pathlib import Path
import json

from config.settings import FERNET_KEY_FILE
from simplechain.errors import StorageReadError


def load_or_create_key(key_file: Path = FERNET_KEY_FILE) -> bytes:
    key_file = Path(key_file)
    if key_file.exists():
        return key_file.read_bytes()

    key_file.parent.mkdir(parents=True, exist_ok=True)
    key = Fernet.generate_key()
    key_file.write_bytes(key)
    return key


class CryptoStore:
    def __init__(self, key_file: Path = FERNET_KEY_FILE, key: bytes | None = None):
        self.key = key if key is not None else load_or_create_key(key_file)
        self.fernet = Fernet(self.key)

    def encrypt(self, obj) -> bytes:
        # record order is preserved, it feeds the block hash
        raw = json.dumps(obj, ensure_ascii=False).encode("utf-8")
        return self.fernet.encrypt(raw)

    def decrypt(self, data: bytes):
        try:
            raw = self.fernet.decrypt(data)
        except InvalidToken as e:
            raise StorageReadError("Unable to decrypt record (wrong key or corrupted file)") from e
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageReadError("Decrypted record is not valid JSON") from e
