import os
import stat
import time
import logging

from filegen.constants import BUFFER_SIZE
from filegen.errors import AlreadyExists, AttributeWarning, WriteFailure
from filegen.utils.logs import elapsed_ms, log_event


logger = logging.getLogger(__name__)

WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


def is_read_only(path: str) -> bool:
    return not os.stat(path).st_mode & WRITE_BITS


def clear_read_only(path: str) -> None:
    mode = stat.S_IMODE(os.stat(path).st_mode)
    os.chmod(path, mode | stat.S_IWUSR)


class FileWriter(object):

    def __init__(self, buffer_size: int = BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self.buffer_size = buffer_size
        self._buffer = bytearray(buffer_size)

    def write(self, path: str, size_bytes: int, source) -> int:
        """Create `path` exclusively and fill it with `size_bytes` random bytes.

        Raises AlreadyExists if the file is already there and WriteFailure on any
        I/O error. A file that fails mid-write is left truncated on disk.
        """
        t0 = time.perf_counter_ns()
        log_event(logger, "WRITE", path, "START", "RUN", f"bytes={size_bytes}")
        try:
            f = open(path, "xb")
        except FileExistsError:
            log_event(logger, "WRITE", path, "END", "ERROR", "msg=exists")
            raise AlreadyExists(path)
        except OSError as e:
            log_event(logger, "WRITE", path, "END", "ERROR", f"phase=CREATE;msg={e}")
            raise WriteFailure(path, 0, str(e)) from e

        written = 0
        view = memoryview(self._buffer)
        try:
            with f:
                while written < size_bytes:
                    n = min(self.buffer_size, size_bytes - written)
                    chunk = view[:n]
                    source.fill(chunk)
                    f.write(chunk)
                    written += n
        except OSError as e:
            log_event(logger, "WRITE", path, "END", "ERROR",
                      f"bytes_written={written};msg={e};time_ms={elapsed_ms(t0):.3f}")
            raise WriteFailure(path, written, str(e)) from e

        log_event(logger, "WRITE", path, "END", "SUCCESS", f"bytes={written};time_ms={elapsed_ms(t0):.3f}")
        return written

    @staticmethod
    def mark_immutable(path: str) -> bool:
        """Drop all write permission bits. Failure is logged, not raised."""
        try:
            mode = stat.S_IMODE(os.stat(path).st_mode)
            os.chmod(path, mode & ~WRITE_BITS)
        except OSError as e:
            warning = AttributeWarning(path, f"Could not make file immutable: {e}")
            logger.warning("GENERATOR,IMMUTABLE,%s,END,WARNING,msg=%s", path, warning)
            return False
        log_event(logger, "IMMUTABLE", path, "END", "SUCCESS", "")
        return True
