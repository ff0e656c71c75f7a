import os
import stat
import time
import logging
from dataclasses import dataclass, field
from typing import List, Union

from filegen.errors import AttributeWarning, CleanupFailure, VerificationMismatch
from filegen.utils.logs import elapsed_ms, log_event
from filegen.writer import WRITE_BITS, clear_read_only


logger = logging.getLogger(__name__)

Problem = Union[VerificationMismatch, AttributeWarning]


@dataclass
class VerificationReport:
    passed: bool = True
    checked: int = 0
    problems: List[Problem] = field(default_factory=list)

    @property
    def errors(self) -> List[Problem]:
        return [p for p in self.problems if p.severity == "error"]

    @property
    def warnings(self) -> List[Problem]:
        return [p for p in self.problems if p.severity == "warning"]

    @property
    def messages(self) -> List[str]:
        return [f"{p.severity.upper()}: {p}" for p in self.problems]

    def __bool__(self) -> bool:
        return self.passed


@dataclass
class CleanupReport:
    deleted: int = 0
    errors: List[CleanupFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        return [str(e) for e in self.errors]


class VerifierCleaner(object):
    """Audits or removes the files recorded by a GenerationSession.

    Both passes visit every record and accumulate per-file problems instead of
    stopping at the first one.
    """

    def __init__(self, session):
        self.session = session

    def verify(self) -> VerificationReport:
        t0 = time.perf_counter_ns()
        expected = self.session.params.file_size_bytes
        report = VerificationReport()
        log_event(logger, "VERIFY", "-", "START", "RUN", f"files={len(self.session.files)}")

        for path in self.session.files:
            report.checked += 1
            try:
                st = os.stat(path)
            except FileNotFoundError:
                report.problems.append(VerificationMismatch(path, "missing", f"File not found: {path}"))
                report.passed = False
                continue
            except OSError as e:
                report.problems.append(VerificationMismatch(path, "unreadable", f"Cannot stat {path}: {e}"))
                report.passed = False
                continue

            if st.st_size != expected:
                report.problems.append(VerificationMismatch(
                    path, "size_mismatch",
                    f"File size mismatch for {path}. Expected: {expected}, Actual: {st.st_size}"))
                report.passed = False

            if st.st_mode & WRITE_BITS:
                report.problems.append(AttributeWarning(path, f"File is not read-only: {path}"))

        for p in report.problems:
            if p.severity == "error":
                logger.error("GENERATOR,VERIFY,%s,END,ERROR,kind=%s;msg=%s", p.path, p.kind, p)
            else:
                logger.warning("GENERATOR,VERIFY,%s,END,WARNING,kind=%s;msg=%s", p.path, p.kind, p)

        log_event(logger, "VERIFY", "-", "END", "SUCCESS" if report.passed else "ERROR",
                  f"checked={report.checked};problems={len(report.problems)};total_time_ms={elapsed_ms(t0):.3f}")
        return report

    @staticmethod
    def _restore_mode(path: str, mode) -> None:
        # A file that survives cleanup keeps the permissions it had before.
        if mode is None or not os.path.lexists(path):
            return
        try:
            os.chmod(path, mode)
        except OSError as e:
            logger.warning("GENERATOR,CLEANUP,%s,END,WARNING,msg=could not restore mode %o: %s", path, mode, e)

    def cleanup(self) -> CleanupReport:
        t0 = time.perf_counter_ns()
        report = CleanupReport()
        targets = self.session.files + self.session.partial_files
        log_event(logger, "CLEANUP", "-", "START", "RUN", f"files={len(targets)}")

        for path in targets:
            if not os.path.lexists(path):
                report.skipped.append(path)
                log_event(logger, "CLEANUP", path, "END", "SKIP", "msg=missing")
                continue
            mode = None
            try:
                mode = stat.S_IMODE(os.lstat(path).st_mode)
                clear_read_only(path)
                os.remove(path)
            except OSError as e:
                failure = CleanupFailure(path, str(e))
                report.errors.append(failure)
                logger.warning("GENERATOR,CLEANUP,%s,END,ERROR,msg=%s", path, e)
                self._restore_mode(path, mode)
                continue
            report.deleted += 1

        # best effort, then forget
        self.session.clear_records()
        log_event(logger, "CLEANUP", "-", "END", "SUCCESS" if not report.errors else "ERROR",
                  f"deleted={report.deleted};errors={len(report.errors)};skipped={len(report.skipped)};"
                  f"total_time_ms={elapsed_ms(t0):.3f}")
        return report
