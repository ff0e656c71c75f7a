import os
import shutil
import logging

from filegen.errors import InsufficientSpace
from filegen.utils.logs import log_event


logger = logging.getLogger(__name__)


def _existing_ancestor(directory: str) -> str:
    path = os.path.abspath(directory)
    while not os.path.exists(path):
        parent = os.path.dirname(path)
        if parent == path:
            break
        path = parent
    return path


class SpaceChecker(object):
    """Pre-flight free space check. Advisory only: space can still run out later."""

    def __init__(self, disk_usage=shutil.disk_usage):
        self._disk_usage = disk_usage

    @staticmethod
    def required_bytes(params) -> int:
        return params.file_count * params.file_size_bytes

    def available_bytes(self, directory: str) -> int:
        return self._disk_usage(_existing_ancestor(directory)).free

    def check_available(self, directory: str, required_bytes: int) -> int:
        available = self.available_bytes(directory)
        if available < required_bytes:
            log_event(logger, "SPACE_CHECK", directory, "END", "ERROR",
                      f"required={required_bytes};available={available}")
            raise InsufficientSpace(required_bytes, available, directory)
        log_event(logger, "SPACE_CHECK", directory, "END", "SUCCESS",
                  f"required={required_bytes};available={available}")
        return available
