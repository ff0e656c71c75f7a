"""
Tests for verification and cleanup of a generated batch.
"""

import os
from pathlib import Path

import pytest

from filegen.session import GenerationSession
from filegen.verify import VerifierCleaner
from filegen.writer import clear_read_only, is_read_only


@pytest.fixture
def session(params):
    s = GenerationSession(params)
    assert s.generate().ok
    yield s
    s.cleanup()
    s.close()


class TestVerify:
    def test_untouched_batch_passes(self, session):
        report = VerifierCleaner(session).verify()
        assert report.passed
        assert bool(report)
        assert report.checked == 5
        assert report.problems == []

    def test_missing_file_reported_once(self, session):
        victim = session.files[2]
        os.remove(victim)

        report = session.verify()

        assert not report.passed
        assert [(p.path, p.kind) for p in report.problems] == [(victim, "missing")]
        assert report.checked == 5
        assert "File not found" in report.messages[0]

    def test_size_mismatch_is_error(self, session):
        victim = session.files[0]
        clear_read_only(victim)
        with open(victim, "ab") as f:
            f.write(b"extra")
        os.chmod(victim, 0o444)

        report = session.verify()

        assert not report.passed
        assert [p.kind for p in report.errors] == ["size_mismatch"]
        assert "Expected: 1000, Actual: 1005" in str(report.errors[0])

    def test_writable_file_is_only_a_warning(self, session):
        clear_read_only(session.files[1])

        report = session.verify()

        assert report.passed
        assert report.errors == []
        assert [(p.path, p.kind) for p in report.warnings] == [(session.files[1], "not_read_only")]
        assert report.messages[0].startswith("WARNING:")

    def test_verify_does_not_mutate(self, session):
        before = {f: Path(f).stat().st_mtime_ns for f in session.files}
        session.verify()
        assert {f: Path(f).stat().st_mtime_ns for f in session.files} == before


class TestCleanup:
    def test_removes_everything_and_forgets(self, session, out_dir: Path):
        files = session.files

        report = session.cleanup()

        assert report.deleted == 5
        assert report.errors == []
        assert session.files == []
        assert not any(Path(f).exists() for f in files)
        assert list(out_dir.iterdir()) == []

    def test_externally_removed_file_is_skipped(self, session):
        files = session.files
        os.remove(files[0])

        report = session.cleanup()

        assert report.deleted == 4
        assert report.skipped == [files[0]]
        assert session.files == []
        assert not any(Path(f).exists() for f in files)

    def test_failure_on_one_file_does_not_stop_the_rest(self, session, monkeypatch):
        files = session.files
        real_remove = os.remove

        def flaky_remove(path):
            if path == files[1]:
                raise PermissionError(13, "Permission denied", path)
            real_remove(path)

        monkeypatch.setattr(os, "remove", flaky_remove)
        report = session.cleanup()
        monkeypatch.undo()

        assert report.deleted == 4
        assert [e.path for e in report.errors] == [files[1]]
        assert "Permission denied" in report.messages[0]
        assert session.files == []
        assert Path(files[1]).exists()
        assert is_read_only(files[1])
        clear_read_only(files[1])
        os.remove(files[1])

    def test_verify_after_cleanup_has_nothing_to_check(self, session):
        session.cleanup()
        report = session.verify()
        assert report.passed
        assert report.checked == 0
