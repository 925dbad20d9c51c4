# config/settings.py
import os
from pathlib import Path

DATA_DIR = Path(os.getenv("SIMPLECHAIN_DATA_DIR", "data"))
CHAIN_DIR = Path(os.getenv("SIMPLECHAIN_CHAIN_DIR", DATA_DIR / "chaindata"))
FERNET_KEY_FILE = Path(os.getenv("SIMPLECHAIN_KEY_FILE", DATA_DIR / "node.fernet.key"))

HOST_IP = os.getenv("HOST_IP", "127.0.0.1")
HOST_PORT = int(os.getenv("HOST_PORT", "8000"))
