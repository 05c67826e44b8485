"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements content fingerprinting using pluggable hash algorithms.

The Fingerprinter streams a file through a fixed-size buffer, so memory use
does not depend on the file size. Any 128-bit algorithm can be plugged in
through the HashAlgorithm interface.
"""

import hashlib

import xxhash

from twinsweep.core.interfaces import HashAlgorithm, HashState
from twinsweep.core.models import DEFAULT_CHUNK_SIZE


# Use the same way to implement and use any other hashing algorithm
class Md5AlgorithmImpl(HashAlgorithm):
    name = "md5"

    def new(self) -> HashState:
        return hashlib.md5()


class XXHash128AlgorithmImpl(HashAlgorithm):
    name = "xxh128"

    def new(self) -> HashState:
        return xxhash.xxh3_128()


ALGORITHMS = {
    Md5AlgorithmImpl.name: Md5AlgorithmImpl,
    XXHash128AlgorithmImpl.name: XXHash128AlgorithmImpl,
}


def algorithm_by_name(name: str) -> HashAlgorithm:
    try:
        return ALGORITHMS[name.strip().lower()]()
    except KeyError:
        raise ValueError(f"Unsupported hash algorithm: '{name}'. Supported: {', '.join(ALGORITHMS)}")


class Fingerprinter:
    """
    Computes hex content digests of files.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.algorithm = algorithm or Md5AlgorithmImpl()
        self.chunk_size = chunk_size

    def fingerprint(self, path: str) -> str:
        """
        Returns the lowercase hex digest of the file content.

        Raises:
            OSError: if the file can't be opened or read.
        """
        state = self.algorithm.new()
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(self.chunk_size), b''):
                state.update(chunk)
        return state.hexdigest()
