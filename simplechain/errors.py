# simplechain/errors.py


class ChainError(Exception):
    """Base class for every failure raised by simplechain."""


class StorageError(ChainError):
    pass


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


class BlockNotFound(ChainError, KeyError):
    """No block is stored at the requested height."""

    def __init__(self, height):
        self.height = height
        super().__init__(f"Block #{height} not found")

    def __str__(self):
        return self.args[0]


class ChainGapError(StorageReadError):
    """Stored heights are not exactly 0..n-1, so there is no safe height to append at."""
