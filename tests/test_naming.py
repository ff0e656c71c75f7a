"""
Tests for unique filename allocation.
"""

import re
from pathlib import Path

import pytest

from filegen.errors import NamespaceExhausted
from filegen.naming import NameAllocator
from filegen.random_source import RandomByteSource

NAME_RE = re.compile(r"^ABC[A-Za-z0-9]{61}\.dat$")


def test_name_format(tmp_path: Path):
    with RandomByteSource() as src:
        name = NameAllocator(str(tmp_path), "ABC", src).allocate()
    assert NAME_RE.match(name)
    assert len(name) == 3 + 61 + len(".dat")


def test_no_duplicates_across_ten_thousand_allocations(tmp_path: Path):
    with RandomByteSource() as src:
        allocator = NameAllocator(str(tmp_path), "ABC", src)
        names = [allocator.allocate() for _ in range(10_000)]
    assert len(set(names)) == 10_000
    assert len(allocator) == 10_000


def test_skips_name_already_on_disk(tmp_path: Path, scripted_source):
    taken, free = "a" * 61, "b" * 61
    (tmp_path / f"ABC{taken}.dat").write_bytes(b"")
    allocator = NameAllocator(str(tmp_path), "ABC", scripted_source([taken, free]))
    assert allocator.allocate() == f"ABC{free}.dat"


def test_skips_name_already_allocated_in_batch(tmp_path: Path, scripted_source):
    same, other = "c" * 61, "d" * 61
    allocator = NameAllocator(str(tmp_path), "ABC", scripted_source([same, same, other]))
    first = allocator.allocate()
    second = allocator.allocate()
    assert first == f"ABC{same}.dat"
    assert second == f"ABC{other}.dat"
    assert first in allocator


def test_exhaustion_raises(tmp_path: Path, scripted_source):
    same = "e" * 61
    allocator = NameAllocator(str(tmp_path), "ABC", scripted_source([same] * 4), max_attempts=3)
    allocator.allocate()
    with pytest.raises(NamespaceExhausted) as exc:
        allocator.allocate()
    assert exc.value.attempts == 3
