import string

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
PREFIX_LENGTH = 3
SUFFIX_LENGTH = 61
FILE_EXTENSION = ".dat"

BUFFER_SIZE = 64 * 1024            # 64 KiB per write
MAX_NAME_ATTEMPTS = 1000

LOG_LEVEL_ENV = "FILEGEN_LOG_LEVEL"
