from __future__ import annotations


class HashTreeError(Exception):
    """Base class for failures raised by tree construction and lookup."""


class EmptyInputError(HashTreeError, ValueError):
    def __init__(self, message: str = "at least one data block is required"):
        super().__init__(message)


class IndexOutOfRangeError(HashTreeError, IndexError):
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"leaf index {index} out of range [0, {size})")


class DataNotFoundError(HashTreeError, LookupError):
    def __init__(self, message: str = "data not present in tree"):
        super().__init__(message)
