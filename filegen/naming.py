import os
import logging

from filegen.constants import ALPHABET, FILE_EXTENSION, MAX_NAME_ATTEMPTS, SUFFIX_LENGTH
from filegen.errors import NamespaceExhausted
from filegen.utils.logs import log_event


logger = logging.getLogger(__name__)


class NameAllocator(object):
    """Allocates `<prefix><61 random alphanumerics>.dat` names unique in a directory.

    A name is rejected if a file of that name exists in `directory` or if it was
    already handed out by this allocator. Allocated names are reserved in memory
    immediately; the file itself is claimed later by exclusive creation.
    """

    def __init__(self, directory: str, prefix: str, source,
                 max_attempts: int = MAX_NAME_ATTEMPTS):
        self.directory = directory
        self.prefix = prefix
        self.source = source
        self.max_attempts = max_attempts
        self._allocated = set()
        self.last_attempts = 0

    def __contains__(self, name: str) -> bool:
        return name in self._allocated

    def __len__(self) -> int:
        return len(self._allocated)

    def _candidate(self) -> str:
        return f"{self.prefix}{self.source.random_string(SUFFIX_LENGTH, ALPHABET)}{FILE_EXTENSION}"

    def _taken(self, name: str) -> bool:
        return name in self._allocated or os.path.exists(os.path.join(self.directory, name))

    def allocate(self, max_attempts: int = None) -> str:
        """Return a free name; `max_attempts` overrides the allocator's bound for this call.

        `last_attempts` holds the number of candidates drawn by the last call.
        """
        limit = self.max_attempts if max_attempts is None else max_attempts
        self.last_attempts = 0
        for attempt in range(1, limit + 1):
            self.last_attempts = attempt
            name = self._candidate()
            if not self._taken(name):
                self._allocated.add(name)
                if attempt > 1:
                    log_event(logger, "ALLOCATE", name, "END", "SUCCESS", f"attempts={attempt}")
                return name
            log_event(logger, "ALLOCATE", name, "END", "RETRY", f"attempt={attempt}/{limit}")

        log_event(logger, "ALLOCATE", "-", "END", "FAIL", f"directory={self.directory};attempts={limit}")
        raise NamespaceExhausted(self.directory, limit)
