"""
Shared test fixtures.
"""

import os
from pathlib import Path

import pytest

from filegen.session import GenerationParameters


class FakeDiskUsage:
    """Stands in for shutil.disk_usage with a fixed free-space value."""

    def __init__(self, free: int):
        self.free = free
        self.queried = []

    def __call__(self, path):
        self.queried.append(path)
        return _Usage(self.free)


class _Usage:
    def __init__(self, free):
        self.total = free
        self.used = 0
        self.free = free


class ScriptedSource:
    """Random source that replays fixed suffixes, then falls back to real randomness."""

    def __init__(self, suffixes=(), fill_byte=0xAB):
        self.suffixes = list(suffixes)
        self.fill_byte = fill_byte
        self.closed = False

    def random_string(self, length, alphabet):
        if self.suffixes:
            return self.suffixes.pop(0)
        return "".join(alphabet[b % len(alphabet)] for b in os.urandom(length))

    def fill(self, buffer):
        buffer[:] = bytes([self.fill_byte]) * len(buffer)

    def close(self):
        self.closed = True


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Return a not-yet-created output directory."""
    return tmp_path / "out"


@pytest.fixture
def params(out_dir: Path) -> GenerationParameters:
    return GenerationParameters(5, 1000, "ABC", str(out_dir))


@pytest.fixture
def disk_usage():
    """Factory: disk_usage(free) -> fake shutil.disk_usage reporting `free` bytes."""
    return FakeDiskUsage


@pytest.fixture
def scripted_source():
    """Factory: scripted_source(suffixes) -> source replaying the given name suffixes."""
    return ScriptedSource
