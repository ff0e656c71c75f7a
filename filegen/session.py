import os
import time
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from filegen.constants import MAX_NAME_ATTEMPTS, PREFIX_LENGTH
from filegen.errors import (AlreadyExists, ConfigurationError, FileGenException, GenerationCancelled,
                            NamespaceExhausted, SessionStateError, WriteFailure)
from filegen.naming import NameAllocator
from filegen.random_source import RandomByteSource
from filegen.space import SpaceChecker
from filegen.utils.logs import elapsed_ms, log_event
from filegen.verify import CleanupReport, VerificationReport, VerifierCleaner
from filegen.writer import FileWriter


logger = logging.getLogger(__name__)


def _positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class GenerationParameters:
    file_count: int
    file_size_bytes: int
    prefix: str
    output_directory: str

    def __post_init__(self):
        _positive_int("file_count", self.file_count)
        _positive_int("file_size_bytes", self.file_size_bytes)

        if not isinstance(self.prefix, str) or not self.prefix.strip():
            raise ConfigurationError("prefix cannot be null or empty")
        if len(self.prefix) != PREFIX_LENGTH:
            raise ConfigurationError(f"prefix must be exactly {PREFIX_LENGTH} characters, got {self.prefix!r}")
        if any(c in self.prefix for c in ("/", "\\", "\0", os.sep)):
            raise ConfigurationError(f"prefix must not contain path separators, got {self.prefix!r}")

        if self.output_directory is None:
            raise ConfigurationError("output directory cannot be null or empty")
        try:
            directory = os.fspath(self.output_directory)
        except TypeError:
            raise ConfigurationError(f"output directory must be a path, got {self.output_directory!r}")
        if not isinstance(directory, str) or not directory.strip():
            raise ConfigurationError("output directory cannot be null or empty")
        object.__setattr__(self, "output_directory", directory)

    @property
    def total_bytes(self) -> int:
        return self.file_count * self.file_size_bytes


@dataclass(frozen=True)
class GeneratedFileRecord:
    path: str
    size_bytes: int = 0
    elapsed_ms: float = 0.0

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class ProgressSnapshot:
    files_generated: int
    total_files: int
    bytes_written: int
    total_bytes: int
    current_file_name: str

    @property
    def percent_complete(self) -> float:
        if self.total_files <= 0:
            return 0.0
        return self.files_generated / self.total_files * 100


class SessionState(Enum):
    CREATED = "created"
    SPACE_VALIDATED = "space_validated"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class GenerationResult:
    state: SessionState
    files: List[str] = field(default_factory=list)
    error: Optional[FileGenException] = None
    partial_path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is SessionState.COMPLETED

    def raise_for_status(self) -> None:
        if self.error is not None:
            raise self.error


class GenerationSession(object):
    """Writes a batch of random-content files and owns the record of what it wrote.

    Usage::

        params = GenerationParameters(10, 1024 * 1024, "ABC", "/tmp/out")
        with GenerationSession(params) as session:
            result = session.generate(progress=print)
            report = session.verify()

    Files created before a mid-batch failure stay on disk and in `files`.
    """

    def __init__(self, params: GenerationParameters, source: RandomByteSource = None,
                 writer: FileWriter = None, space_checker: SpaceChecker = None,
                 max_attempts: int = MAX_NAME_ATTEMPTS):
        if not isinstance(params, GenerationParameters):
            raise ConfigurationError(f"expected GenerationParameters, got {type(params).__name__}")
        self.params = params
        self.state = SessionState.CREATED
        self.max_attempts = max_attempts
        self._source = source or RandomByteSource()
        self._writer = writer or FileWriter()
        self._space = space_checker or SpaceChecker()
        self._allocator = NameAllocator(params.output_directory, params.prefix, self._source,
                                        max_attempts=max_attempts)
        self._records: List[GeneratedFileRecord] = []
        self._partial: List[str] = []
        log_event(logger, "INIT", params.prefix, "END", "SUCCESS",
                  f"count={params.file_count};size={params.file_size_bytes};output={params.output_directory}")

    @property
    def total_bytes(self) -> int:
        return self._space.required_bytes(self.params)

    @property
    def records(self) -> List[GeneratedFileRecord]:
        return list(self._records)

    @property
    def files(self) -> List[str]:
        return [r.path for r in self._records]

    @property
    def partial_files(self) -> List[str]:
        return list(self._partial)

    @property
    def closed(self) -> bool:
        return self._source.closed

    def clear_records(self) -> None:
        self._records.clear()
        self._partial.clear()

    def check_space(self) -> int:
        """CREATED -> SPACE_VALIDATED, or FAILED with InsufficientSpace raised."""
        if self.state is not SessionState.CREATED:
            raise SessionStateError(f"space check not allowed in state {self.state.value}")
        try:
            available = self._space.check_available(self.params.output_directory, self.total_bytes)
        except FileGenException:
            self.state = SessionState.FAILED
            raise
        except OSError as e:
            self.state = SessionState.FAILED
            raise WriteFailure(self.params.output_directory, 0, f"disk usage query failed: {e}") from e
        self.state = SessionState.SPACE_VALIDATED
        return available

    def generate(self, progress: Callable[[ProgressSnapshot], None] = None, cancel=None) -> GenerationResult:
        """Run the batch. `progress` is called once per completed file; `cancel`
        is anything with `is_set()` and is checked between files."""
        if self.closed:
            raise SessionStateError("session is closed")
        if self.state not in (SessionState.CREATED, SessionState.SPACE_VALIDATED):
            raise SessionStateError(f"generate not allowed in state {self.state.value}")

        params = self.params
        t_total = time.perf_counter_ns()
        log_event(logger, "GENERATE", params.prefix, "START", "RUN",
                  f"count={params.file_count};size={params.file_size_bytes};total_bytes={self.total_bytes};"
                  f"output={params.output_directory}")
        try:
            if self.state is SessionState.CREATED:
                self.check_space()

            try:
                os.makedirs(params.output_directory, exist_ok=True)
            except OSError as e:
                raise WriteFailure(params.output_directory, 0, f"cannot create output directory: {e}") from e

            self.state = SessionState.GENERATING
            for i in range(params.file_count):
                if cancel is not None and cancel.is_set():
                    raise GenerationCancelled(i)
                record = self._generate_one()
                self._records.append(record)
                if progress is not None:
                    progress(ProgressSnapshot(
                        files_generated=i + 1,
                        total_files=params.file_count,
                        bytes_written=(i + 1) * params.file_size_bytes,
                        total_bytes=self.total_bytes,
                        current_file_name=record.name,
                    ))
        except FileGenException as e:
            self.state = SessionState.FAILED
            logger.error("GENERATOR,GENERATE,%s,END,ERROR,files=%d;msg=%s;total_time_ms=%.3f",
                         params.prefix, len(self._records), e, elapsed_ms(t_total))
            return GenerationResult(self.state, self.files, e, self._partial[-1] if self._partial else None)
        except BaseException:
            self.state = SessionState.FAILED
            raise

        self.state = SessionState.COMPLETED
        log_event(logger, "GENERATE", params.prefix, "END", "SUCCESS",
                  f"phase=SUMMARY;files={len(self._records)};total_time_ms={elapsed_ms(t_total):.3f}")
        return GenerationResult(self.state, self.files)

    def _generate_one(self) -> GeneratedFileRecord:
        size = self.params.file_size_bytes
        # One attempt budget covers both the allocator's pre-check and lost creation races.
        budget = self.max_attempts
        while budget > 0:
            try:
                name = self._allocator.allocate(max_attempts=budget)
            except NamespaceExhausted as e:
                raise NamespaceExhausted(self.params.output_directory, self.max_attempts) from e
            budget -= self._allocator.last_attempts
            path = os.path.join(self.params.output_directory, name)
            t0 = time.perf_counter_ns()
            try:
                self._writer.write(path, size, self._source)
            except AlreadyExists:
                # Another writer claimed the name after the pre-check.
                log_event(logger, "GENERATE", name, "END", "RETRY", f"budget_left={budget};msg=exists")
                continue
            except BaseException:
                # Truncated file, left for cleanup().
                if os.path.lexists(path):
                    self._partial.append(path)
                raise
            write_ms = elapsed_ms(t0)
            self._writer.mark_immutable(path)
            return GeneratedFileRecord(path, size, write_ms)

        raise NamespaceExhausted(self.params.output_directory, self.max_attempts)

    def verify(self) -> VerificationReport:
        return VerifierCleaner(self).verify()

    def cleanup(self) -> CleanupReport:
        return VerifierCleaner(self).cleanup()

    def close(self) -> None:
        self._source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
