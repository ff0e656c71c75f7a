import os
import logging

from filegen.constants import ALPHABET


logger = logging.getLogger(__name__)


class RandomByteSource(object):
    """Cryptographically strong random bytes backed by the OS generator.

    The source must be closed when no longer needed; it is a context manager.
    """

    def __init__(self, urandom=os.urandom):
        self._urandom = urandom
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self):
        if self._closed:
            raise ValueError("random source is closed")

    def fill(self, buffer) -> None:
        """Overwrite every byte of a writable buffer (bytearray or memoryview) with random data."""
        self._check_open()
        buffer[:] = self._urandom(len(buffer))

    def random_string(self, length: int, alphabet: str = ALPHABET) -> str:
        """Random string drawn from `alphabet`, one 32-bit value per character.

        The value is reduced modulo len(alphabet), which is slightly biased when
        the alphabet size does not divide 2**32. Strings are only used for
        filename uniqueness, so the bias is accepted.
        """
        self._check_open()
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        raw = self._urandom(4 * length)
        size = len(alphabet)
        return "".join(
            alphabet[int.from_bytes(raw[i:i + 4], "little") % size]
            for i in range(0, 4 * length, 4)
        )

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            logger.debug("GENERATOR,RANDOM_SOURCE,-,END,CLOSED,")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
